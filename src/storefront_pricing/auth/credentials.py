"""
Credential providers for the storefront backend.

current_token() always returns either a Token or an Unauthenticated value;
callers branch on the type instead of checking for None.
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Token:
    """A bearer access token."""
    access_token: str

    def authorization_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}


@dataclass(frozen=True)
class Unauthenticated:
    """Why no token is available."""
    reason: str


TokenResult = Union[Token, Unauthenticated]


class CredentialProvider:
    """Interface: something that knows the current access token."""

    def current_token(self) -> TokenResult:
        raise NotImplementedError

    def clear_session(self) -> None:
        raise NotImplementedError


class CorruptSession(Exception):
    """The persisted session file could not be parsed."""


class PersistedSessionProvider(CredentialProvider):
    """
    Session persisted as JSON on disk.

    File shape: {"user": {...}, "accessToken": "...", "refreshToken": "..."}
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[dict]:
        """Return the stored session, or None. A corrupt file is deleted."""
        if not self.path.exists():
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                session = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Discarding unreadable session file %s: %s", self.path, e)
            self.clear_session()
            raise CorruptSession(str(e)) from e
        return session if isinstance(session, dict) else None

    def save(self, session: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(session, f)

    def current_token(self) -> TokenResult:
        try:
            session = self.load()
        except CorruptSession:
            return Unauthenticated("corrupt session file")
        if not session or not session.get('accessToken'):
            return Unauthenticated("no persisted session")
        return Token(session['accessToken'])

    def clear_session(self) -> None:
        self.path.unlink(missing_ok=True)


class SessionStore:
    """
    In-memory auth state, constructed once at startup and passed by reference.

    Writes go through to the persisted provider when one is given, and a new
    store starts from whatever the persisted provider holds.
    """

    def __init__(self, persisted: Optional[PersistedSessionProvider] = None):
        self.persisted = persisted
        self.user: Optional[dict] = None
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None

        if persisted is not None:
            try:
                session = persisted.load() or {}
            except CorruptSession:
                session = {}
            self.user = session.get('user')
            self.access_token = session.get('accessToken')
            self.refresh_token = session.get('refreshToken')

    def as_dict(self) -> dict:
        return {
            "user": self.user,
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
        }

    def set_session(self, user: Optional[dict] = None, access_token: Optional[str] = None,
                    refresh_token: Optional[str] = None) -> None:
        """Merge new values over the current session; None keeps the current value."""
        if user is not None:
            self.user = user
        if access_token is not None:
            self.access_token = access_token
        if refresh_token is not None:
            self.refresh_token = refresh_token
        self._persist()

    def update_user(self, user: dict) -> None:
        """Replace the user only (e.g. after government verification)."""
        self.user = user
        self._persist()

    def logout(self) -> None:
        self.user = None
        self.access_token = None
        self.refresh_token = None
        if self.persisted is not None:
            self.persisted.clear_session()

    def _persist(self):
        if self.persisted is not None:
            self.persisted.save(self.as_dict())


class StoreCredentialProvider(CredentialProvider):
    """Reads the token from a live SessionStore."""

    def __init__(self, store: SessionStore):
        self.store = store

    def current_token(self) -> TokenResult:
        if self.store.access_token:
            return Token(self.store.access_token)
        return Unauthenticated("session store has no access token")

    def clear_session(self) -> None:
        self.store.logout()


class CompositeCredentialProvider(CredentialProvider):
    """
    Tries each provider in order; the first Token wins.

    Typical chain: StoreCredentialProvider, then PersistedSessionProvider.
    """

    def __init__(self, *providers: CredentialProvider):
        if not providers:
            raise ValueError("CompositeCredentialProvider needs at least one provider")
        self.providers = providers

    def current_token(self) -> TokenResult:
        reasons = []
        for provider in self.providers:
            result = provider.current_token()
            if isinstance(result, Token):
                return result
            reasons.append(result.reason)
        return Unauthenticated("; ".join(reasons))

    def clear_session(self) -> None:
        for provider in self.providers:
            provider.clear_session()


def default_credentials(session_file: Path) -> tuple[SessionStore, CompositeCredentialProvider]:
    """Store-backed provider wrapping a persisted-session provider."""
    persisted = PersistedSessionProvider(session_file)
    store = SessionStore(persisted)
    return store, CompositeCredentialProvider(StoreCredentialProvider(store), persisted)
