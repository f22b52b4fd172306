from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuration via environment variables.

    The access token file is ACCESS_TOKEN_DIR/ACCESS_TOKEN_FILE_NAME, e.g.
    ACCESS_TOKEN_DIR=/var/lib/merchant-webhooks
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Clover configuration
    CLOVER_SERVER: str = Field(
        ...,
        description="Base server for REST calls, e.g. https://apisandbox.dev.clover.com"
    )
    HTTP_TIMEOUT: float = Field(default=10.0, description="Timeout in seconds for detail calls")

    # Token storage
    ACCESS_TOKEN_DIR: str = Field(default=".", description="Directory holding the token file")
    ACCESS_TOKEN_FILE_NAME: str = Field(
        default="access_tokens.json",
        description="JSON file mapping merchant id to access token"
    )

    # Protects the token save endpoint when set
    ADMIN_TOKEN: str | None = Field(default=None, description="Shared secret for /auth")

    # Server
    PORT: int = Field(default=8000, description="HTTP server port")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    @field_validator("CLOVER_SERVER", mode="before")
    @classmethod
    def validate_server(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("CLOVER_SERVER must be set, e.g. https://api.clover.com")
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid server: {v}. Expected http:// or https:// URL")
        return v.rstrip("/")

    def get_access_token_path(self) -> Path:
        """Returns the location of the access token file."""
        return Path(self.ACCESS_TOKEN_DIR) / self.ACCESS_TOKEN_FILE_NAME


def get_settings() -> Settings:
    """Factory function to get settings instance.

    This allows for lazy initialization and easier testing.
    """
    return Settings()
