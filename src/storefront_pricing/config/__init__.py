"""Config subpackage - settings and logging."""
from .settings import Settings, get_settings, reset_settings
from .logging import setup_logging

__all__ = ['Settings', 'get_settings', 'reset_settings', 'setup_logging']
