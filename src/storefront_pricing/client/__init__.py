"""Client subpackage - HTTP access to the storefront backend."""
from .api_client import StorefrontApiClient, ApiError, AuthenticationRequired, SessionExpired

__all__ = ['StorefrontApiClient', 'ApiError', 'AuthenticationRequired', 'SessionExpired']
