"""Result type returned by every backend operation."""

from typing import Any

from pydantic import BaseModel, Field, model_validator


class BackendFailure(BaseModel):
    """Normalized failure reported by a backend operation.

    Attributes:
        message: Human-readable failure message, passed through verbatim.
        code: Backend error code or status, if known.
        details: Additional structured detail, if any.
    """

    message: str = Field(..., description="Failure message")
    code: str | int | None = Field(default=None, description="Backend error code")
    details: Any | None = Field(default=None, description="Additional error data")


class BackendResult(BaseModel):
    """Either a success payload or a failure, never both.

    Attributes:
        payload: Result payload on success.
        error: Failure description on error.
    """

    payload: dict[str, Any] | None = Field(default=None, description="Payload on success")
    error: BackendFailure | None = Field(default=None, description="Failure on error")

    @model_validator(mode="after")
    def _exactly_one_side(self) -> "BackendResult":
        if (self.payload is None) == (self.error is None):
            raise ValueError("exactly one of payload or error must be set")
        return self

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def ok(cls, payload: dict[str, Any]) -> "BackendResult":
        """Create a successful result.

        Args:
            payload: Result data.

        Returns:
            BackendResult with payload populated.
        """
        return cls(payload=payload)

    @classmethod
    def failure(
        cls,
        message: str,
        code: str | int | None = None,
        details: Any | None = None,
    ) -> "BackendResult":
        """Create a failed result.

        Args:
            message: Failure message.
            code: Optional error code.
            details: Optional error data.

        Returns:
            BackendResult with error populated.
        """
        return cls(error=BackendFailure(message=message, code=code, details=details))
