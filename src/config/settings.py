"""
Knife Hit - Application Settings

Loads configuration from environment variables using Pydantic Settings.
On Streamlit Cloud, bridges st.secrets into env vars so Pydantic can read them.
"""

import logging
import os
from functools import lru_cache

from pydantic_settings import BaseSettings

_SECRET_KEYS = (
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "PROFILE_ID",
    "DEBUG",
    "LOG_LEVEL",
    "ENABLE_SOUNDS",
)


def _load_streamlit_secrets() -> None:
    """Bridge Streamlit Cloud secrets into environment variables."""
    try:
        import streamlit as st

        for key in _SECRET_KEYS:
            if key not in os.environ and key in st.secrets:
                os.environ[key] = str(st.secrets[key])
    except Exception:
        pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Supabase (optional: the economy is kept in memory without it)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    storage_table: str = "kv_store"
    profile_id: str = "local"

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # Gameplay pacing
    tick_rate: int = 60
    throw_duration: float = 0.1
    win_delay: float = 0.1

    # Audio
    enable_sounds: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @property
    def has_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    _load_streamlit_secrets()
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the configured log level to the root logger."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)
