from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_env: str = "local"
    api_prefix: str = "/api"
    clinic_name: str = "PrescWeb Clinic"

    # Security
    secret_key: str = "changeme"  # override in .env
    access_token_expire_minutes: int = 60 * 12
    session_cookie_name: str = "prescweb_session"

    # Database
    database_url: str = "sqlite:///./prescweb_main.db"
    auto_create_tables: bool = True
    seed_default_templates: bool = True

    # Medicine search
    search_result_limit: int = 20

    # CORS
    cors_origins: list[str] = ["http://127.0.0.1:3001", "http://localhost:3001"]

    # Logging
    log_level: str = "INFO"

    # Pydantic v2 style config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached settings instance so the .env is parsed once.
    """
    return Settings()
