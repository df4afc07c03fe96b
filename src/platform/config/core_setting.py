from pathlib import Path
from typing import Annotated, List, Literal

import orjson
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Gate Check-In Service'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Security
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ALGORITHM: str = 'HS256'

    # CORS
    # Comma-separated in env files; NoDecode keeps pydantic-settings from JSON-parsing it
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and v.strip().startswith('['):
            return orjson.loads(v)
        elif isinstance(v, str):
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'check_in_db'
    POSTGRES_PORT: int = 5432

    # asyncpg pool
    ASYNCPG_POOL_MIN_SIZE: int = 2
    ASYNCPG_POOL_MAX_SIZE: int = 10
    ASYNCPG_POOL_COMMAND_TIMEOUT: float = 10.0
    ASYNCPG_POOL_MAX_INACTIVE_LIFETIME: float = 300.0
    ASYNCPG_POOL_TIMEOUT: float = 10.0
    ASYNCPG_POOL_MAX_QUERIES: int = 50000

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:'
            f'{self.POSTGRES_PASSWORD.get_secret_value()}@'
            f'{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    # Check-in engine
    # 'memory' is an empty unseeded store for tests and demos only; in production every scan
    # would resolve to not_found
    CHECK_IN_REPO_BACKEND: Literal['postgres', 'memory'] = 'postgres'
    CHECK_IN_WINDOW_HOURS: float = 4.0  # Events carry no end time; window = start + this
    CHECK_IN_OPERATION_TIMEOUT_SECONDS: float = 5.0
    CHECK_IN_TRANSIENT_RETRIES: int = 1
    DISPLAY_TIMEZONE: str = 'UTC'

    # Signed QR payloads
    QR_SECRET_KEY: SecretStr = SecretStr('EVENTEASE_DEV_SECRET_KEY_CHANGE_IN_PRODUCTION')
    QR_SIGNATURE_REQUIRED: bool = True
    QR_WINDOW_SECONDS: int = 30
    QR_BUFFER_WINDOWS: int = 2
    QR_MAX_AGE_DAYS: int = 365


settings = Settings()  # type: ignore
