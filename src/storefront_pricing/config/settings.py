"""
Centralized settings for the storefront pricing package.

Values come from environment variables (a local .env file is honoured).
"""
import os
from decimal import Decimal
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 4 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Remote storefront backend
    api_url: str = "http://localhost:5000"
    request_timeout: float = 10.0

    # Tax
    gst_rate: Decimal = Decimal("0.18")
    currency_symbol: str = "₹"

    # Persisted session (stand-in for the browser's localStorage "session")
    session_file: Optional[Path] = None

    # Seller details printed on invoices and quotes
    seller_name: str = "CuttingEdge Enterprises"
    seller_address: str = "Doulatabad, Srinagar, J&K, India - 190003"
    seller_gstin: str = "01CYSPA5416L1ZF"

    log_level: str = "INFO"

    @classmethod
    def load(cls, env_file: Optional[Path] = None) -> 'Settings':
        """Load settings from the environment."""
        root = get_project_root()
        load_dotenv(env_file or root / '.env')

        session_file = os.environ.get('STOREFRONT_SESSION_FILE')

        return cls(
            api_url=os.environ.get('STOREFRONT_API_URL', cls.api_url).rstrip('/'),
            request_timeout=float(os.environ.get('STOREFRONT_REQUEST_TIMEOUT', cls.request_timeout)),
            gst_rate=Decimal(os.environ.get('STOREFRONT_GST_RATE', str(cls.gst_rate))),
            currency_symbol=os.environ.get('STOREFRONT_CURRENCY_SYMBOL', cls.currency_symbol),
            session_file=Path(session_file) if session_file else root / '.session.json',
            seller_name=os.environ.get('STOREFRONT_SELLER_NAME', cls.seller_name),
            seller_address=os.environ.get('STOREFRONT_SELLER_ADDRESS', cls.seller_address),
            seller_gstin=os.environ.get('STOREFRONT_SELLER_GSTIN', cls.seller_gstin),
            log_level=os.environ.get('STOREFRONT_LOG_LEVEL', cls.log_level).upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
