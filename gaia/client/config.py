"""Client settings, read from GAIA_-prefixed environment variables."""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GAIA_", extra="ignore")

    API_URL: str = "http://localhost:5000/api"
    # Where the session is persisted between runs; None keeps it in memory
    SESSION_FILE: Optional[str] = None
    REQUEST_TIMEOUT: float = 30.0
    NOTIFICATION_DURATION_MS: int = 5000


client_settings = ClientSettings()
