"""
Core Validators

Request checks shared by the HTTP routers. Each raises ValueError with a
message prefixed by the calling module; routers turn that into a 400.
"""

from typing import Optional

_MB = 1024 * 1024


def validate_file_size(
    size_bytes: int,
    max_size_mb: int,
    module_name: str = "Module"
) -> None:
    """
    Reject empty uploads and uploads above the size limit.

    Args:
        size_bytes: Size of the uploaded file
        max_size_mb: Maximum allowed size in megabytes
        module_name: Prefix for the error message

    Raises:
        ValueError: If the file is empty or too large
    """
    if size_bytes <= 0:
        raise ValueError(f"{module_name}: Uploaded file is empty.")
    if size_bytes > max_size_mb * _MB:
        raise ValueError(
            f"{module_name}: File size ({size_bytes / _MB:.1f} MB) "
            f"exceeds maximum of {max_size_mb} MB."
        )


def validate_text_length(text: str, max_chars: int, module_name: str = "Module") -> None:
    """Reject text longer than `max_chars`."""
    if len(text) > max_chars:
        raise ValueError(
            f"{module_name}: Text is {len(text)} characters, "
            f"limit is {max_chars}."
        )


def validate_required_field(value: Optional[str], field_name: str, module_name: str = "Module") -> None:
    """Reject a missing or whitespace-only form/body field."""
    if value is None or not value.strip():
        raise ValueError(f"{module_name}: {field_name} is required.")
