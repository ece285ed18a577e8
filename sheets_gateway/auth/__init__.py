"""Auth module initialization."""

from .exceptions import (
    SheetsGatewayError,
    ConfigurationError,
    CredentialError,
)
from .models import ApiKeyAuth, ServiceAccountAuth, OAuthAuth, AuthMode
from .credentials import (
    SCOPES,
    auth_mode_from_settings,
    build_google_credentials,
    mask_secret,
    RequestAuthorizer,
)

__all__ = [
    # Exceptions
    "SheetsGatewayError",
    "ConfigurationError",
    "CredentialError",
    # Models
    "ApiKeyAuth",
    "ServiceAccountAuth",
    "OAuthAuth",
    "AuthMode",
    # Credentials
    "SCOPES",
    "auth_mode_from_settings",
    "build_google_credentials",
    "mask_secret",
    "RequestAuthorizer",
]
