# config.py
"""Environment-based configuration."""
import os
from typing import List, Optional


class Settings:
    def __init__(self):
        self.openai_api_key = os.getenv("OPENAI_API_KEY", "")
        self.openai_model = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        # Any OpenAI-compatible endpoint, e.g. https://api.groq.com/openai/v1
        self.openai_base_url: Optional[str] = os.getenv("OPENAI_BASE_URL") or None
        self.openai_timeout = float(os.getenv("OPENAI_TIMEOUT", "30"))
        # Unset means leads and results only live as long as the process
        self.database_path: Optional[str] = os.getenv("DATABASE_PATH") or None
        self.port = int(os.getenv("PORT", "8000"))
        self.cors_origins: List[str] = [
            o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
        ]


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Forget the cached settings so the environment is read again."""
    global _settings
    _settings = None
