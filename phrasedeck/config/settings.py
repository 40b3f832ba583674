"""Global settings and configuration."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load from project root
_env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(_env_path)


@dataclass
class Config:
    """Application-wide configuration."""

    # Generation endpoint
    # Store the key in an environment variable or .env file: GEMINI_API_KEY
    GEMINI_API_KEY: str = os.environ.get("GEMINI_API_KEY", "")
    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-2.5-flash"
    OPENAI_MODEL: str = "gpt-4o-mini"

    # Batch contract
    PHRASE_COUNT: int = 10

    # Retry policy: 5 attempts, 1s base delay doubling (1s, 2s, 4s, 8s)
    RETRIES: int = 5
    BASE_BACKOFF_MS: int = 1000
    TIMEOUT: int = 60

    # Minimum wait between successful regenerations
    COOLDOWN_SECONDS: int = 5 * 60

    # Speech
    SPEECH_PROVIDER: str = "edge-tts"

    # Cross-platform paths using pathlib
    BASE_DIR: Path = Path(__file__).parent.parent.parent.resolve()
    MEDIA_DIR: str = str(BASE_DIR / "media")
    SETTINGS_FILE: str = str(BASE_DIR / "settings.json")
