"""
Resume storage service - persists the Markdown projection of each user's resume
One directory per user under the storage root, named by a hash of the user id,
holding resume.md
"""

import os
import shutil
from datetime import datetime
from typing import Optional

# Local imports
from models import SavedResume
from utils import user_storage_key, ensure_directory_exists

RESUME_FILENAME = "resume.md"


def save_resume(user_id: str, content: str, storage_dir: str) -> SavedResume:
    """
    Creates or replaces the stored resume for a user.
    """
    user_dir = _user_directory(user_id, storage_dir)
    resume_path = os.path.join(user_dir, RESUME_FILENAME)

    try:
        ensure_directory_exists(user_dir)
        with open(resume_path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        print(f"❌ Error saving resume: {e}")
        raise ValueError("Failed to save resume") from e

    print(f"📄 Resume saved to: {resume_path}")
    return _load(user_id, resume_path)


def get_resume(user_id: str, storage_dir: str) -> Optional[SavedResume]:
    """Returns the stored resume for a user, or None if there isn't one."""
    resume_path = os.path.join(_user_directory(user_id, storage_dir), RESUME_FILENAME)
    if not os.path.exists(resume_path):
        return None
    return _load(user_id, resume_path)


def has_resume(user_id: str, storage_dir: str) -> bool:
    resume_path = os.path.join(_user_directory(user_id, storage_dir), RESUME_FILENAME)
    return os.path.exists(resume_path)


def clear_resume(user_id: str, storage_dir: str) -> bool:
    """
    Removes everything stored for a user.
    Returns True if there was anything to remove.
    """
    user_dir = _user_directory(user_id, storage_dir)
    if not os.path.isdir(user_dir):
        return False

    shutil.rmtree(user_dir)
    print(f"🗑️ Cleared stored data for user: {user_id}")
    return True


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _user_directory(user_id: str, storage_dir: str) -> str:
    key = user_storage_key(user_id)
    if not key:
        raise ValueError("Unauthorized")
    return os.path.join(storage_dir, key)


def _load(user_id: str, resume_path: str) -> SavedResume:
    with open(resume_path, "r", encoding="utf-8") as f:
        content = f.read()
    return SavedResume(
        user_id=user_id,
        content=content,
        updated_at=datetime.fromtimestamp(os.path.getmtime(resume_path)),
    )
