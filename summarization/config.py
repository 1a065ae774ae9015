"""
Summarization Configuration

Module-specific settings for localized document summarization.
"""
import os

from config import GEMINI_API_KEY, GEMINI_API_BASE_URL

# =========================
# LLM Backend Configuration
# =========================

SUMMARIZATION_API_KEY = os.getenv("SUMMARIZATION_API_KEY", GEMINI_API_KEY)
SUMMARIZATION_API_BASE_URL = os.getenv("SUMMARIZATION_API_BASE_URL", GEMINI_API_BASE_URL)
SUMMARIZATION_API_VERSION = os.getenv("SUMMARIZATION_API_VERSION", "v1beta")

# =========================
# Model Settings
# =========================

# Tried in order on the SDK surface; a "model not found" moves to the next one
SUMMARIZATION_CANDIDATE_MODELS = [
    m.strip()
    for m in os.getenv(
        "SUMMARIZATION_CANDIDATE_MODELS",
        "gemini-2.5-flash,gemini-2.5-pro,gemini-2.0-flash"
    ).split(",")
    if m.strip()
]

# Single direct REST call once every candidate is unavailable
SUMMARIZATION_REST_MODEL = os.getenv("SUMMARIZATION_REST_MODEL", "gemini-2.0-flash")

# =========================
# LLM Settings for Summarization
# =========================

SUMMARIZATION_TEMPERATURE = float(os.getenv("SUMMARIZATION_TEMPERATURE", "0.3"))
SUMMARIZATION_MAX_TOKENS = int(os.getenv("SUMMARIZATION_MAX_TOKENS", "4096"))

# =========================
# Connection Settings
# =========================

SUMMARIZATION_CONNECTION_TIMEOUT = int(os.getenv("SUMMARIZATION_CONNECTION_TIMEOUT", "120"))
SUMMARIZATION_CONNECTION_POOL_LIMIT = int(os.getenv("SUMMARIZATION_CONNECTION_POOL_LIMIT", "50"))

# =========================
# Input Limits
# =========================

SUMMARIZATION_MAX_INPUT_CHARS = int(os.getenv("SUMMARIZATION_MAX_INPUT_CHARS", "2000000"))

# =========================
# Language Settings
# =========================

SUMMARIZATION_SOURCE_LANGUAGE = "English"
SUMMARIZATION_DEFAULT_LANGUAGE = os.getenv("SUMMARIZATION_DEFAULT_LANGUAGE", "English")
