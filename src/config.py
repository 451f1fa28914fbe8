"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    database_url: str

    # Redis
    redis_url: str

    # External submission API (empty = store submissions locally only)
    submission_api_base_url: str = ""
    submission_api_timeout: float = 10.0

    # App
    log_level: str = "INFO"
    environment: str = "development"

    # Admin panel
    admin_email: str = "admin@example.com"
    admin_password_hash: str = ""  # see scripts/create_admin_user.py
    admin_session_ttl_seconds: int = 86400  # 24 hours
    cookie_secure: bool = True

    # Onboarding wizard
    wizard_session_ttl_seconds: int = 3600  # 1 hour

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()  # type: ignore[call-arg]
