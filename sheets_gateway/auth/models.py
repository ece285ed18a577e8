"""Pydantic models describing how the backend client authenticates."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ApiKeyAuth(BaseModel):
    """Bearer-less access with a Google API key.

    Attributes:
        api_key: Key sent as the ``key`` query parameter.
    """

    kind: Literal["api_key"] = "api_key"
    api_key: str = Field(..., min_length=1, repr=False)

    model_config = ConfigDict(frozen=True)

    @property
    def auth_type(self) -> str:
        return "API Key"


class ServiceAccountAuth(BaseModel):
    """Service-account credentials, from a key file or in-memory JSON.

    Attributes:
        key_file: Path to the service-account key file.
        key_json: Raw service-account key JSON text.
    """

    kind: Literal["service_account"] = "service_account"
    key_file: str | None = None
    key_json: str | None = Field(default=None, repr=False)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _exactly_one_source(self) -> "ServiceAccountAuth":
        if bool(self.key_file) == bool(self.key_json):
            raise ValueError("exactly one of key_file or key_json must be provided")
        return self

    @property
    def auth_type(self) -> str:
        return "Service Account"


class OAuthAuth(BaseModel):
    """Installed-app OAuth client with a long-lived refresh token.

    Attributes:
        client_id: OAuth client identifier.
        client_secret: OAuth client secret.
        refresh_token: Refresh token obtained through the consent flow.
    """

    kind: Literal["oauth"] = "oauth"
    client_id: str = Field(..., min_length=1)
    client_secret: str = Field(..., min_length=1, repr=False)
    refresh_token: str = Field(..., min_length=1, repr=False)

    model_config = ConfigDict(frozen=True)

    @property
    def auth_type(self) -> str:
        return "OAuth2"


AuthMode = Annotated[
    ApiKeyAuth | ServiceAccountAuth | OAuthAuth,
    Field(discriminator="kind"),
]
