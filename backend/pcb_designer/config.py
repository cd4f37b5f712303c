from pydantic_settings import BaseSettings
from functools import lru_cache
from pydantic import Field


class Settings(BaseSettings):
    app_name: str = "PCB AI Designer"
    debug: bool = True
    env: str = "development"
    log_level: str = "INFO"

    # Server
    backend_host: str = "0.0.0.0"
    backend_port: int = 8000
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:8080",
        "http://localhost:3000",
    ]

    # PostgreSQL
    postgres_user: str = "pcb_designer"
    postgres_password: str = "changeme"
    postgres_db: str = "pcb_designer"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    database_url_override: str | None = Field(default=None, alias="DATABASE_URL")
    auto_migrate_on_startup: bool = False

    # LLM gateway (OpenAI-compatible)
    llm_api_key: str = "sk-placeholder"
    llm_base_url: str = ""  # Empty = OpenAI default. Set for the gateway.
    llm_model: str = "google/gemini-2.5-flash"
    llm_temperature: float = 0.8
    llm_timeout: float = 60.0

    # Design rule check
    drc_enforce_structure: bool = True

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def async_database_url(self) -> str:
        return self.database_url.replace("postgresql://", "postgresql+asyncpg://")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
