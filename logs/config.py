"""
Logging settings for the document summarizer.

Console output is always on; rotating files under LOG_OUTPUT_DIR can be
switched off with LOG_TO_FILE=false.
"""
import os
from pathlib import Path

# =========================
# Output
# =========================

# Default: <repo>/logs/output/
LOG_OUTPUT_DIR = os.getenv("LOG_OUTPUT_DIR", str(Path(__file__).parent / "output"))

LOG_TO_FILE = os.getenv("LOG_TO_FILE", "true").lower() == "true"

# Console only; file handlers keep their own fixed levels
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# =========================
# Rotation
# =========================

LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", str(10 * 1024 * 1024)))
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "5"))

# =========================
# Previews
# =========================

# Prompts and model output
LOG_PREVIEW_LENGTH = int(os.getenv("LOG_PREVIEW_LENGTH", "200"))

# Parser upload/status/result bodies; a result body can be a whole document
LOG_PAYLOAD_PREVIEW_LENGTH = int(os.getenv("LOG_PAYLOAD_PREVIEW_LENGTH", "500"))

# =========================
# Formats
# =========================

LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(request_id)-36s | %(user_id)-16s | "
    "%(module)-16s | %(message)s"
)

LOG_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(request_id)-36s | %(message)s"

# One JSON object per line
LOG_METRICS_FORMAT = "%(message)s"

# =========================
# Files
# =========================

LOG_FILE_PIPELINE = os.getenv("LOG_FILE_PIPELINE", "pipeline.log")
LOG_FILE_ERRORS = os.getenv("LOG_FILE_ERRORS", "pipeline_errors.log")
LOG_FILE_DEBUG = os.getenv("LOG_FILE_DEBUG", "pipeline_debug.log")
LOG_FILE_METRICS = os.getenv("LOG_FILE_METRICS", "llm_metrics.log")
