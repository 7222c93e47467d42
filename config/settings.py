from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Optional
from pathlib import Path

from core.domain.constants import TOKEN_REFRESH_INTERVAL_SECONDS, TOKEN_TTL_HOURS


class Settings(BaseSettings):
    """Application settings - reads from environment variables"""

    # Supabase (database connection)
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_key: str = ""
    db_schema: str = "public"

    # "supabase" in deployments, "memory" for local runs without a database
    db_backend: str = "supabase"

    # Auth
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    token_ttl_hours: int = TOKEN_TTL_HOURS

    # HTTP
    frontend_url: str = "http://localhost:5173"
    port: int = 5000

    # Environment
    env: str = "development"
    debug: bool = False

    @field_validator('db_backend', mode='before')
    @classmethod
    def parse_backend(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
        if v not in ("supabase", "memory"):
            raise ValueError("DB_BACKEND must be 'supabase' or 'memory'")
        return v

    @property
    def database_key(self) -> Optional[str]:
        """Service key wins over the anon key when both are set"""
        return self.supabase_service_key or self.supabase_key or None

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env" if Path(".env").exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,  # JWT_SECRET == jwt_secret
    )


class ClientSettings(BaseSettings):
    """Command-line client settings - EVENTHUB_* environment variables"""

    api_url: str = "http://localhost:5000"
    # Where the bearer token is kept between runs (the client's "local storage")
    token_file: Path = Path.home() / ".eventhub" / "token.json"
    refresh_interval_seconds: int = TOKEN_REFRESH_INTERVAL_SECONDS

    model_config = SettingsConfigDict(
        env_prefix="EVENTHUB_",
        env_file=".env" if Path(".env").exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Create settings instance
settings = Settings()
