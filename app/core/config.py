from typing import List, Optional
from urllib.parse import urlsplit

from pydantic import AliasChoices, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOWED_ORIGINS = ["http://localhost:3000", "http://localhost:8080"]

# Passwords that ship in docker-compose and docs; never acceptable in production
DEFAULT_DB_PASSWORDS = {"postgres", "password", "changeme"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_parse_delimiter=",")

    PROJECT_NAME: str = "Employee Directory API"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: Optional[str] = None

    # Accepts a JSON array or a comma-separated string
    ALLOWED_ORIGINS: List[str] | str = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS),
        validation_alias=AliasChoices("ALLOWED_ORIGINS", "BACKEND_CORS_ORIGINS"),
    )

    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_SERVER: str = Field(
        default="db",
        validation_alias=AliasChoices("POSTGRES_SERVER", "POSTGRES_HOST"),
    )
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "employees"

    # Takes precedence over the POSTGRES_* parts when set
    DATABASE_URL: Optional[str] = None
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    SQLALCHEMY_ECHO: bool = False

    # Create missing tables on startup. Deployments run `alembic upgrade head` instead.
    DB_CREATE_TABLES: bool = True

    @computed_field
    @property
    def IS_PRODUCTION(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, list):
            return [v.strip() for v in value if isinstance(v, str) and v.strip()]
        return value

    def model_post_init(self, __context):
        if not self.DATABASE_URL:
            self.DATABASE_URL = (
                f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

        if self.IS_PRODUCTION:
            problems = self.production_problems()
            if problems:
                raise ValueError(
                    "Production configuration errors:\n" + "\n".join(f"  - {p}" for p in problems)
                )

    def production_problems(self) -> List[str]:
        """Every setting that is unsafe to run in production, in one list."""
        problems = []
        if urlsplit(self.DATABASE_URL).password in DEFAULT_DB_PASSWORDS:
            problems.append("Database password is insecure; set POSTGRES_PASSWORD or DATABASE_URL.")
        if not self.ALLOWED_ORIGINS or set(self.ALLOWED_ORIGINS) <= set(DEFAULT_ALLOWED_ORIGINS):
            problems.append("ALLOWED_ORIGINS must list your own domain(s), not the localhost defaults.")
        if self.DEBUG:
            problems.append("DEBUG must be False in production.")
        return problems


settings = Settings()
