"""Application settings and validation."""

import os
from pathlib import Path

from .errors import ConfigurationError

BASE = Path(__file__).resolve().parent.parent


class Settings:
    ENV: str
    SUPABASE_URL: str
    SUPABASE_SERVICE_ROLE_KEY: str
    API_KEY: str
    PETITION_STORAGE: str
    PETITION_TABLE: str
    PETITION_DB_URL: str
    PDF_FONT_PATH: str
    PDF_BOLD_FONT_PATH: str
    CORS_MAX_AGE: int

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.SUPABASE_URL = os.getenv("SUPABASE_URL", "")
        self.SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
        self.API_KEY = os.getenv("API_KEY", "")
        self.PETITION_STORAGE = os.getenv("PETITION_STORAGE", "supabase").strip().lower()
        self.PETITION_TABLE = os.getenv("PETITION_TABLE", "basvurular")
        self.PETITION_DB_URL = os.getenv("PETITION_DB_URL", f"sqlite:///{BASE / 'petitions.db'}")
        self.PDF_FONT_PATH = os.getenv("PDF_FONT_PATH", "").strip()
        self.PDF_BOLD_FONT_PATH = os.getenv("PDF_BOLD_FONT_PATH", "").strip()
        try:
            self.CORS_MAX_AGE = int(os.getenv("CORS_MAX_AGE", "86400"))
        except ValueError:
            self.CORS_MAX_AGE = 86400

    def require_supabase(self) -> tuple[str, str]:
        """Return the Supabase URL and service key or raise if either is missing."""
        for name in ("SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY"):
            if not getattr(self, name):
                raise ConfigurationError(f"Missing env: {name}")
        return self.SUPABASE_URL, self.SUPABASE_SERVICE_ROLE_KEY


def get_settings() -> Settings:
    """FastAPI dependency that reads the environment for each request."""
    return Settings()
