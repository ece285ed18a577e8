"""Custom exceptions for credential configuration and token handling."""


class SheetsGatewayError(Exception):
    """Base exception for all Sheets Gateway errors."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ConfigurationError(SheetsGatewayError):
    """Raised when the process cannot start with the given settings.

    This is the only process-fatal error kind; it is raised during bootstrap
    and never while serving calls.
    """

    def __init__(self, message: str):
        super().__init__(message=message, code="CONFIGURATION_ERROR")


class CredentialError(SheetsGatewayError):
    """Raised when an access token cannot be obtained for a request.

    Attributes:
        auth_type: Human-readable name of the active auth mode.
        reason: Description of the refresh failure.
    """

    def __init__(self, auth_type: str, reason: str):
        super().__init__(
            message=f"Failed to obtain {auth_type} credentials: {reason}",
            code="CREDENTIAL_ERROR"
        )
        self.auth_type = auth_type
        self.reason = reason
