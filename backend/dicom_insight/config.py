"""Application configuration from environment variables."""
from fastapi import Request
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All config comes from env vars or .env.backend file."""

    FILE_STORAGE_PATH: str = "./backend/uploads"
    MAX_UPLOAD_BYTES: int = 100 * 1024 * 1024
    UPLOAD_CHUNK_SIZE: int = 1024 * 1024

    # Simulated enhancement
    PROCESS_DELAY_SECONDS: float = 2.0
    ENHANCER: str = "identity"

    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8721
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env.backend",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()


def get_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings the app was built with."""
    return request.app.state.settings
