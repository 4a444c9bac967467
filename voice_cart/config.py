"""
Configuration Module for Voice Cart
===================================

This module centralizes the environment variables and defaults used by the
Voice Cart service. Values are parsed once at import time; `main.py` loads a
`.env` file with python-dotenv before anything imports this module.

Configuration Categories:
-------------------------
- **Database**: Where the shopping list and add history are stored.

- **Transcription**: AssemblyAI credentials and polling behaviour for turning
  recorded audio into transcript text.

- **Rate Limiting**: Throttling for the audio endpoints, which call a paid
  external API.

- **Input Validation**: Maximum utterance and audio payload sizes.

- **Interpreter / Suggestions**: Default language tag and suggestion limits.

- **CORS Settings**: Allowed origins for the browser frontend.

Environment Variables:
----------------------
- DATABASE_URL: SQLAlchemy URL (default: "sqlite:///./voice_cart.db")
- ASSEMBLYAI_API_KEY: AssemblyAI API key (required for audio endpoints)
- ASSEMBLYAI_BASE_URL: API base URL (default: "https://api.assemblyai.com")
- TRANSCRIBE_POLL_INTERVAL: Seconds between status polls (default: 1.0)
- TRANSCRIBE_MAX_ATTEMPTS: Polls before giving up (default: 60)
- TRANSCRIBE_REQUEST_TIMEOUT: Per-request timeout in seconds (default: 30)
- RATE_LIMIT_VOICE: Audio endpoint rate limit (default: "20 per minute")
- RATE_LIMIT_ENABLED: Enable/disable rate limiting (default: "true")
- MAX_UTTERANCE_LENGTH: Max transcript/command length (default: 500)
- MAX_AUDIO_BASE64_LENGTH: Max base64 audio size (default: 50 MB)
- DEFAULT_LANGUAGE: Language tag used when a request omits one (default: "en")
- CORS_ORIGINS: Comma-separated allowed origins (default: "*")

Usage:
------
    from voice_cart.config import (
        DATABASE_URL,
        ASSEMBLYAI_API_KEY,
        MAX_UTTERANCE_LENGTH,
    )
"""

import os
from typing import List


# =============================================================================
# Database Configuration
# =============================================================================

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./voice_cart.db")


# =============================================================================
# Transcription Configuration
# =============================================================================
# Audio is uploaded to AssemblyAI, a transcript job is created and then polled
# until it completes. The whole round trip is bounded by
# TRANSCRIBE_POLL_INTERVAL * TRANSCRIBE_MAX_ATTEMPTS.

ASSEMBLYAI_API_KEY: str = os.getenv("ASSEMBLYAI_API_KEY", "")
ASSEMBLYAI_BASE_URL: str = os.getenv("ASSEMBLYAI_BASE_URL", "https://api.assemblyai.com")

TRANSCRIBE_POLL_INTERVAL: float = float(os.getenv("TRANSCRIBE_POLL_INTERVAL", "1.0"))
TRANSCRIBE_MAX_ATTEMPTS: int = int(os.getenv("TRANSCRIBE_MAX_ATTEMPTS", "60"))
TRANSCRIBE_REQUEST_TIMEOUT: float = float(os.getenv("TRANSCRIBE_REQUEST_TIMEOUT", "30"))

# Interpreter language tag -> AssemblyAI language_code
TRANSCRIBE_LANGUAGE_CODES = {
    "en": "en_us",
    "hi": "hi",
}


# =============================================================================
# Rate Limiting Configuration
# =============================================================================
# Uses slowapi with in-memory storage (use Redis for multi-worker prod).

RATE_LIMIT_VOICE: str = os.getenv("RATE_LIMIT_VOICE", "20 per minute")
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"


def get_rate_limit_voice() -> str:
    """
    Return the current audio endpoint rate limit.

    This function allows dynamic override in tests without modifying
    the module-level constant.
    """
    return RATE_LIMIT_VOICE


# =============================================================================
# Input Validation Configuration
# =============================================================================

MAX_UTTERANCE_LENGTH: int = int(os.getenv("MAX_UTTERANCE_LENGTH", "500"))

# The browser records short webm/opus clips; 50 MB of base64 is plenty
MAX_AUDIO_BASE64_LENGTH: int = int(os.getenv("MAX_AUDIO_BASE64_LENGTH", str(50 * 1024 * 1024)))


# =============================================================================
# Interpreter / Suggestion Configuration
# =============================================================================

DEFAULT_LANGUAGE: str = os.getenv("DEFAULT_LANGUAGE", "en")

SUGGESTION_LIMIT = 6
RECENT_SUGGESTION_COUNT = 5
POPULAR_SUGGESTION_COUNT = 2
FREQUENT_SUGGESTION_COUNT = 3
# History entries untouched for longer than this are suggested again
FREQUENT_STALE_DAYS = 7


# =============================================================================
# CORS Configuration
# =============================================================================
# Format: comma-separated list of origins, e.g., "https://cart.example.com"
# Default "*" allows all origins (suitable for development only)

_cors_origins_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in _cors_origins_env.split(",")
    if origin.strip()
] or ["*"]
