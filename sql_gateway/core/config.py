from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Primary db runs client queries, the second one is only for provisioning
    DATABASE_URL: str
    DATABASE_URL2: str

    HOST: str = "0.0.0.0"
    PORT: int = 3000

    PROVISION_ONCE: bool = True
    RUN_POLICY_CHECKS: bool = False
    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    # This tells Pydantic to read from the .env file
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Hosted postgres hands out plain postgres:// urls, the async engine needs the driver
    @field_validator("DATABASE_URL", "DATABASE_URL2")
    @classmethod
    def use_async_driver(cls, url: str) -> str:
        for prefix in ("postgres://", "postgresql://"):
            if url.startswith(prefix):
                return "postgresql+asyncpg://" + url[len(prefix):]
        return url


# Create a single instance of the settings to use everywhere
settings = Settings()
