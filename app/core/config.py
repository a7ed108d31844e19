from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Online Subscriptions API"
    app_env: str = "local"
    app_debug: bool = True
    api_port: int = 8080
    database_url: str | None = None
    db_host: str = "postgres"
    db_port: int = 5432
    db_user: str = "subscriptions"
    db_password: str = "subscriptions"
    db_name: str = "subscriptions"
    db_auto_migrate: bool = False
    log_level: str = "INFO"
    metrics_enabled: bool = False
    otel_enabled: bool = False
    otel_service_name: str = "subscriptions-api"
    otel_exporter_otlp_endpoint: str | None = None
    otel_console_exporter: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
