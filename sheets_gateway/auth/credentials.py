"""Credential selection and request authorization for Google APIs."""

import json
from pathlib import Path
from typing import Any

import anyio
from anyio.to_thread import run_sync
import google.auth.exceptions
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import credentials as oauth2_credentials
from google.oauth2 import service_account
from structlog import get_logger

from sheets_gateway.config import Settings

from .exceptions import ConfigurationError, CredentialError
from .models import ApiKeyAuth, AuthMode, OAuthAuth, ServiceAccountAuth

logger = get_logger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


def mask_secret(value: str, visible: int = 4) -> str:
    """Return the first characters of a secret followed by an ellipsis."""
    return f"{value[:visible]}..."


def auth_mode_from_settings(settings: Settings) -> AuthMode:
    """Select the single auth mode to use from the configured settings.

    Precedence: API key, service-account JSON, service-account file, then
    the OAuth client id/secret/refresh token triple.

    Args:
        settings: Loaded application settings.

    Returns:
        The selected auth mode.

    Raises:
        ConfigurationError: If no usable credentials are configured, the
            service-account file is missing, or the project id is missing
            outside OAuth mode.
    """
    if not (
        settings.GOOGLE_API_KEY
        or settings.GOOGLE_APPLICATION_CREDENTIALS
        or settings.GOOGLE_APPLICATION_CREDENTIALS_JSON
        or settings.oauth_configured
    ):
        raise ConfigurationError(
            "Either GOOGLE_API_KEY, GOOGLE_APPLICATION_CREDENTIALS, "
            "GOOGLE_APPLICATION_CREDENTIALS_JSON, or OAuth credentials "
            "(client_id, client_secret, refresh_token) must be provided"
        )

    if not settings.GOOGLE_CLOUD_PROJECT_ID and not settings.oauth_configured:
        raise ConfigurationError("GOOGLE_CLOUD_PROJECT_ID is required unless OAuth credentials are used")

    if settings.GOOGLE_API_KEY:
        logger.info("auth_mode_selected", auth_type="API Key", api_key=mask_secret(settings.GOOGLE_API_KEY))
        return ApiKeyAuth(api_key=settings.GOOGLE_API_KEY)

    if settings.GOOGLE_APPLICATION_CREDENTIALS_JSON:
        logger.info("auth_mode_selected", auth_type="Service Account", source="json")
        return ServiceAccountAuth(key_json=settings.GOOGLE_APPLICATION_CREDENTIALS_JSON)

    if settings.GOOGLE_APPLICATION_CREDENTIALS:
        key_file = settings.GOOGLE_APPLICATION_CREDENTIALS
        if not Path(key_file).is_file():
            raise ConfigurationError(f"Service account key file not found at: {key_file}")
        logger.info("auth_mode_selected", auth_type="Service Account", source="file", key_file=key_file)
        return ServiceAccountAuth(key_file=key_file)

    logger.info("auth_mode_selected", auth_type="OAuth2", client_id=mask_secret(settings.client_id))
    return OAuthAuth(
        client_id=settings.client_id,
        client_secret=settings.client_secret,
        refresh_token=settings.refresh_token,
    )


def build_google_credentials(auth: AuthMode, token_uri: str = DEFAULT_TOKEN_URI) -> Any | None:
    """Build google-auth credentials for token-based auth modes.

    Args:
        auth: Selected auth mode.
        token_uri: OAuth token endpoint for refresh-token exchange.

    Returns:
        A google-auth credentials object, or None for API-key auth.

    Raises:
        ConfigurationError: If the service-account material cannot be parsed.
    """
    if isinstance(auth, ApiKeyAuth):
        return None

    if isinstance(auth, ServiceAccountAuth):
        try:
            if auth.key_json:
                info = json.loads(auth.key_json)
                return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
            return service_account.Credentials.from_service_account_file(auth.key_file, scopes=SCOPES)
        except (ValueError, OSError) as exc:
            raise ConfigurationError(f"Invalid service account credentials: {exc}") from exc

    return oauth2_credentials.Credentials(
        token=None,
        refresh_token=auth.refresh_token,
        client_id=auth.client_id,
        client_secret=auth.client_secret,
        token_uri=token_uri,
        scopes=SCOPES,
    )


class RequestAuthorizer:
    """Produces the headers and query parameters that authorize one request.

    Token refreshes run in a worker thread because google-auth's transport
    is synchronous. A lock makes concurrent callers share one refresh.

    Attributes:
        auth_type: Human-readable name of the active auth mode.
    """

    def __init__(
        self,
        auth: AuthMode,
        credentials: Any | None = None,
        token_uri: str = DEFAULT_TOKEN_URI,
        transport: Any | None = None,
    ) -> None:
        self.auth_type = auth.auth_type
        self._api_key = auth.api_key if isinstance(auth, ApiKeyAuth) else None
        if self._api_key is None and credentials is None:
            credentials = build_google_credentials(auth, token_uri=token_uri)
        self._credentials = credentials
        if self._api_key is None and transport is None:
            transport = GoogleAuthRequest()
        self._transport = transport
        self._lock = anyio.Lock()

    async def authorize(self) -> tuple[dict[str, str], dict[str, str]]:
        """Return ``(headers, params)`` to attach to an outgoing request.

        Raises:
            CredentialError: If a token refresh fails.
        """
        if self._api_key is not None:
            return {}, {"key": self._api_key}

        async with self._lock:
            if not self._credentials.valid:
                try:
                    await run_sync(self._credentials.refresh, self._transport)
                except google.auth.exceptions.GoogleAuthError as exc:
                    raise CredentialError(self.auth_type, str(exc)) from exc
                logger.debug("access_token_refreshed", auth_type=self.auth_type)

        return {"Authorization": f"Bearer {self._credentials.token}"}, {}

    def close(self) -> None:
        """Release the session used for token refreshes."""
        if isinstance(self._transport, GoogleAuthRequest):
            self._transport.session.close()
