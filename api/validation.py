# api/validation.py
"""
Request validation for the build endpoint. Runs before any workspace exists.
"""

from typing import Any, Optional, Tuple

from api.config import DEFAULT_MAX_SOURCE_SIZE


def validate_source_code(source_code: Any, max_size: int = DEFAULT_MAX_SOURCE_SIZE) -> Tuple[bool, Optional[str]]:
    """
    Returns (True, None) if valid, otherwise (False, "<error message>").
    """
    if source_code is None:
        return False, "Missing 'sourceCode' field."
    if not isinstance(source_code, str):
        return False, "'sourceCode' must be a string."
    if len(source_code) == 0:
        return False, "'sourceCode' must be a non-empty string."
    if len(source_code) > max_size:
        return False, f"Source code too large (>{max_size} characters)."
    return True, None
