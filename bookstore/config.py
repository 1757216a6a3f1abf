"""Application configuration module."""
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_env: str = Field(default="development", alias="APP_ENV")
    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")
    pg_host: str = Field(default="localhost", alias="PGHOST")
    pg_port: int = Field(default=5432, alias="PGPORT")
    pg_user: str = Field(default="postgres", alias="PGUSER")
    pg_password: str = Field(default="", alias="PGPASSWORD")
    pg_database: str = Field(default="express_bookstore", alias="PGDATABASE")

    db_pool_min_size: int = Field(default=1, alias="DB_POOL_MIN_SIZE")
    db_pool_max_size: int = Field(default=10, alias="DB_POOL_MAX_SIZE")

    api_host: str = Field(default="127.0.0.1", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "populate_by_name": True,
    }

    @property
    def database_name(self) -> str:
        # The test suite runs against its own database
        if self.app_env == "test":
            return f"{self.pg_database}-test"
        return self.pg_database

    @property
    def database_dsn(self) -> str:
        # An explicit URL names the exact database, test runs included
        if self.database_url:
            return self.database_url
        # Empty password means trust auth for local development
        password = self.pg_password.strip()
        credentials = f"{self.pg_user}:{password}" if password else self.pg_user
        return f"postgresql://{credentials}@{self.pg_host}:{self.pg_port}/{self.database_name}"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
