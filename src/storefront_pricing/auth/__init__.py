"""Auth subpackage - session state and credential providers."""
from .credentials import (
    Token,
    Unauthenticated,
    CredentialProvider,
    SessionStore,
    StoreCredentialProvider,
    PersistedSessionProvider,
    CompositeCredentialProvider,
    default_credentials,
)

__all__ = [
    'Token', 'Unauthenticated', 'CredentialProvider', 'SessionStore',
    'StoreCredentialProvider', 'PersistedSessionProvider',
    'CompositeCredentialProvider', 'default_credentials',
]
