"""
Application configuration

Settings are read from the environment and the `.env` file in the working
directory the server is started from.
JWT_SECRET is generated and persisted to `.env` on first run when absent,
so tokens survive restarts without manual setup.
"""
import logging
import os
import secrets
from pathlib import Path
from typing import Annotated, List, Optional

from dotenv import load_dotenv, set_key
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)

# Relative to the directory the server is started from
WORKING_DIR = Path.cwd()
ENV_FILE = WORKING_DIR / ".env"


def ensure_jwt_secret(env_file: Path = ENV_FILE) -> str:
    """
    Return JWT_SECRET from the environment, generating and persisting one if needed.

    The generated secret is appended to `env_file` (created if missing) and
    exported into the current process environment.
    """
    load_dotenv(env_file)
    existing = os.environ.get("JWT_SECRET")
    if existing:
        return existing

    logger.warning("JWT_SECRET not found in environment. Generating a new one...")
    generated = secrets.token_hex(64)

    env_file.touch(exist_ok=True)
    set_key(str(env_file), "JWT_SECRET", generated, quote_mode="never")
    os.environ["JWT_SECRET"] = generated

    logger.info(f"JWT_SECRET generated and saved to {env_file}")
    return generated


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        case_sensitive=True,
        extra="ignore",
    )

    # App
    APP_NAME: str = "GAIA Cosmetics API"
    API_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    PORT: int = 5000

    # Database
    DB_PATH: str = str(WORKING_DIR / "data" / "gaia.db")
    DATABASE_URL: Optional[str] = None
    SEED_ON_STARTUP: bool = True

    # Auth
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 24 * 60

    # CORS - "*" or a comma-separated list of origins
    CORS_ORIGIN: Annotated[List[str], NoDecode] = ["*"]

    # Checkout
    CURRENCY: str = "INR"
    CURRENCY_SYMBOL: str = "₹"
    FLAT_SHIPPING_COST: float = 50.0
    FREE_SHIPPING_THRESHOLD: float = 999.0
    ESTIMATED_DELIVERY: str = "3-5 business days"

    @field_validator("CORS_ORIGIN", mode="before")
    @classmethod
    def parse_cors_origin(cls, v):
        if isinstance(v, str):
            origins = [origin.strip() for origin in v.split(",") if origin.strip()]
            return origins or ["*"]
        return v

    @model_validator(mode="after")
    def derive_database_url(self):
        if not self.DATABASE_URL:
            self.DATABASE_URL = f"sqlite+aiosqlite:///{self.DB_PATH}"
        return self

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def sqlite_path(self) -> Optional[Path]:
        """Filesystem path of the SQLite database, or None for in-memory/other engines."""
        if not self.is_sqlite:
            return None
        raw = self.DATABASE_URL.split(":///", 1)[-1]
        if not raw or raw == ":memory:":
            return None
        return Path(raw)


ensure_jwt_secret()
settings = Settings()
