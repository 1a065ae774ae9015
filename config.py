"""
Global Configuration

Shared settings used across all modules.
Module-specific settings are in each module's config.py file.

All settings can be overridden via environment variables or a .env file.
See .env.example for a complete list of configurable variables.
"""
import os
from dotenv import load_dotenv

# Load .env file before any os.getenv() calls
load_dotenv()

import tiktoken

# For airgapped systems, set TIKTOKEN_CACHE_DIR to a directory containing pre-cached encoding files.
try:
    _encoder = tiktoken.get_encoding("cl100k_base")
except Exception:
    _encoder = None

# =========================
# Document Parser (LlamaParse)
# =========================

LLAMAPARSE_API_KEY = os.getenv("LLAMAPARSE_API_KEY", "")
LLAMAPARSE_BASE_URL = os.getenv("LLAMAPARSE_BASE_URL", "https://api.cloud.llamaindex.ai")

# =========================
# Generative Language API (Gemini)
# =========================

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_API_BASE_URL = os.getenv("GEMINI_API_BASE_URL", "https://generativelanguage.googleapis.com")

# =========================
# Upload Settings
# =========================

MAX_UPLOAD_SIZE_MB = int(os.getenv("MAX_UPLOAD_SIZE_MB", "50"))
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "/tmp/doc_summarizer/uploads")

# =========================
# Server Settings
# =========================

SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("SERVER_PORT", "3001"))
CORS_ALLOW_ORIGINS = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]
DEBUG_ERRORS = os.getenv("DEBUG_ERRORS", "false").lower() == "true"


# =========================
# Utility Functions
# =========================

def validate_api_keys() -> None:
    """
    Fail fast when a required API key is missing.

    Raises:
        RuntimeError: Listing every missing key
    """
    missing = [
        name for name, value in (
            ("LLAMAPARSE_API_KEY", LLAMAPARSE_API_KEY),
            ("GEMINI_API_KEY", GEMINI_API_KEY),
        )
        if not value
    ]
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")


def estimate_tokens(text: str) -> int:
    """
    Estimate token count using tiktoken if an encoding is available,
    otherwise ~4 chars per token.
    """
    if _encoder is not None:
        return len(_encoder.encode(text))
    return len(text) // 4
