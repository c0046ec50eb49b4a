from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from forum_bridge.services.retry import RetryPolicy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = "dev"
    app_host: str = "0.0.0.0"
    app_port: int = 8000

    forum_base_url: str = "https://www.horlogeforum.nl"
    discourse_api_key: str = ""
    discourse_api_username: str = ""

    log_level: str = "INFO"
    http_timeout_seconds: float = 20.0
    api_retry_max_attempts: int = 3
    api_retry_base_delay_seconds: float = 1.0
    api_retry_max_delay_seconds: float = 8.0

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy.bounded(
            self.api_retry_max_attempts,
            self.api_retry_base_delay_seconds,
            self.api_retry_max_delay_seconds,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
