from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):
    # App
    APP_NAME: str = "google-sheets-manager"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Google credentials (exactly one mode is selected at startup)
    GOOGLE_API_KEY: str | None = None
    GOOGLE_APPLICATION_CREDENTIALS: str | None = None
    GOOGLE_APPLICATION_CREDENTIALS_JSON: str | None = None
    GOOGLE_CLOUD_PROJECT_ID: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    refresh_token: str | None = None

    # Google APIs
    SHEETS_API_BASE_URL: str = "https://sheets.googleapis.com/v4"
    DRIVE_API_BASE_URL: str = "https://www.googleapis.com/drive/v3"
    OAUTH_TOKEN_URI: str = "https://oauth2.googleapis.com/token"
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # Transports
    MAX_CONCURRENT_CALLS: int = 8
    HTTP_HOST: str = "127.0.0.1"
    HTTP_PORT: int = 8000

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def oauth_configured(self) -> bool:
        """True when the full OAuth client id/secret/refresh token triple is set."""
        return bool(self.client_id and self.client_secret and self.refresh_token)

@lru_cache()
def get_settings() -> Settings:
    return Settings()
