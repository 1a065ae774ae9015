"""
Text Extractor Configuration

Module-specific settings for the remote document parsing service.
"""
import os

from config import LLAMAPARSE_API_KEY, LLAMAPARSE_BASE_URL

# =========================
# Parser Service
# =========================

PARSER_API_KEY = os.getenv("PARSER_API_KEY", LLAMAPARSE_API_KEY)
PARSER_BASE_URL = os.getenv("PARSER_BASE_URL", LLAMAPARSE_BASE_URL)

PARSER_UPLOAD_PATH = "/api/v1/parsing/upload"

# Status is read from the versioned path first, then the legacy one
PARSER_STATUS_PATH = "/api/v1/parsing/job/{job_id}"
PARSER_LEGACY_STATUS_PATH = "/api/parsing/job/{job_id}"

# Tried in order when a SUCCESS status carries no recognizable text field
PARSER_RESULT_PATHS = (
    "/api/v1/parsing/job/{job_id}/result",
    "/api/v1/parsing/job/{job_id}/download",
    "/api/parsing/job/{job_id}/result",
    "/api/parsing/job/{job_id}/download",
    "/api/parsing/job/{job_id}/content",
    "/api/parsing/job/{job_id}/parsed",
)

# Field names that may carry the job id in the upload response
PARSER_JOB_ID_FIELDS = ("id", "job_id")

# =========================
# Polling Settings
# =========================

# max_attempts * poll_interval is the total parse budget (default 120s)
PARSER_MAX_POLL_ATTEMPTS = int(os.getenv("PARSER_MAX_POLL_ATTEMPTS", "60"))
PARSER_POLL_INTERVAL_SECONDS = float(os.getenv("PARSER_POLL_INTERVAL_SECONDS", "2.0"))

# Pause after the first SUCCESS before reading results
PARSER_SETTLE_DELAY_SECONDS = float(os.getenv("PARSER_SETTLE_DELAY_SECONDS", "1.0"))

# =========================
# Connection Settings
# =========================

PARSER_UPLOAD_TIMEOUT = int(os.getenv("PARSER_UPLOAD_TIMEOUT", "60"))
PARSER_STATUS_TIMEOUT = int(os.getenv("PARSER_STATUS_TIMEOUT", "10"))
PARSER_RESULT_TIMEOUT = int(os.getenv("PARSER_RESULT_TIMEOUT", "30"))
PARSER_CONNECTION_POOL_LIMIT = int(os.getenv("PARSER_CONNECTION_POOL_LIMIT", "50"))

# =========================
# Extraction Settings
# =========================

# Unstructured fallback only accepts strings longer than this
PARSER_MIN_TEXT_LENGTH = int(os.getenv("PARSER_MIN_TEXT_LENGTH", "100"))

# Uploads with these extensions are read directly, never sent to the parser
PARSER_TEXT_EXTENSIONS = {".txt"}
