"""Application settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings."""

    debug_mode: bool = False
    backend_mode: str = "in_memory"  # in_memory or http
    backend_base_url: str = ""  # Required when backend_mode=http
    backend_timeout_seconds: int = 30
    territory_code: str = ""  # Sent as X-Territory-Code when set
    wizard_state_repository: str = "in_memory"  # in_memory or redis
    wizard_state_ttl_seconds: int = 86400  # 24 hours default
    transition_lock: str = "in_memory"  # in_memory or redis
    transition_lock_ttl_seconds: int = 60
    redis_url: str = "redis://localhost:6379/0"
    candidate_page_size: int = 5

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
    )


settings = Settings()
