"""
Shared utility functions for the resume builder
"""

import hashlib
import os
import re
from datetime import datetime


def sanitize_for_path(text: str, max_len: int = 50, style: str = 'descriptive') -> str:
    """
    Sanitize text for use in file/directory names.
    Returns an empty string for empty or non-string input.
    """
    if not text or not isinstance(text, str):
        return ""

    # Remove or replace problematic characters
    sanitized = re.sub(r'[<>:"/\\|?*\x00-\x1f]', '', text)
    sanitized = re.sub(r'\s+', '_', sanitized.strip())
    sanitized = re.sub(r'_+', '_', sanitized)
    sanitized = sanitized.strip('_.')

    if style == 'compact':
        sanitized = re.sub(r'[^a-zA-Z0-9_-]', '', sanitized)

    return sanitized[:max_len]


def user_storage_key(user_id: str) -> str:
    """
    Directory name for a user's stored files. Distinct ids always map to
    distinct keys, whatever characters they contain.
    """
    if not user_id or not isinstance(user_id, str) or not user_id.strip():
        return ""
    return hashlib.sha256(user_id.encode("utf-8")).hexdigest()


def ensure_directory_exists(directory_path: str) -> None:
    """Ensure a directory exists, create if not."""
    os.makedirs(directory_path, exist_ok=True)


def format_display_date(value: str) -> str:
    """
    Converts a month input value ("2022-03") into the display form used in
    the resume ("Mar 2022"). Values that don't parse are returned unchanged.
    """
    if not value:
        return ""
    try:
        return datetime.strptime(value.strip(), "%Y-%m").strftime("%b %Y")
    except ValueError:
        return value

