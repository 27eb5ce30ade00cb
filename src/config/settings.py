"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Client credentials
    # JSON object of client_id -> client_secret (multi-app setup)
    client_map: str = ""
    # Fallback pair for a single-app setup
    client_id: str = ""
    client_secret: str = ""

    # CORS
    # Comma-separated list of allowed origins. Empty = mirror any origin
    allowed_origins: str = ""

    # Logging
    log_level: str = "INFO"
    audit_log_file: str = ""  # Empty = stdout only

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "frozen": True}

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins, dropping blanks."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
