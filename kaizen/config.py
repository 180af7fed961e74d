"""
Kaizen Configuration

Central settings loaded from environment variables.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- Versioning ---
    VERSION: str = "1.0.0"
    API_VERSION: str = "1"

    # --- LLM Provider ---
    LLM_PROVIDER: str = os.getenv("KAIZEN_LLM_PROVIDER", "gemini")
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    SUGGEST_MODEL: str = os.getenv("KAIZEN_SUGGEST_MODEL", "gemini-2.5-flash-lite")

    # --- Live validation / autocomplete ---
    DEBOUNCE_MS: int = int(os.getenv("KAIZEN_DEBOUNCE_MS", "500"))
    AUTOCOMPLETE_MIN_CHARS: int = int(os.getenv("KAIZEN_AUTOCOMPLETE_MIN_CHARS", "8"))
    SUGGESTION_CACHE_TTL: int = int(os.getenv("KAIZEN_SUGGESTION_CACHE_TTL", "3600"))

    # --- Server ---
    HOST: str = os.getenv("KAIZEN_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("KAIZEN_PORT", "8000"))

    # --- CORS ---
    CORS_ORIGINS: str = os.getenv("KAIZEN_CORS_ORIGINS", "*")


settings = Settings()
