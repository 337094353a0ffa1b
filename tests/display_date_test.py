import os
import sys

import pytest

# This block adds the project's root directory to Python's search path.
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from utils import format_display_date, sanitize_for_path, user_storage_key


@pytest.mark.parametrize("value, expected", [
    ("2022-03", "Mar 2022"),
    ("2019-12", "Dec 2019"),
    ("", ""),
    (None, ""),
    ("March 2022", "March 2022"),
    ("2022-13", "2022-13"),
])
def test_format_display_date(value, expected):
    assert format_display_date(value) == expected


def test_sanitize_for_path():
    assert sanitize_for_path("user_2abc/../x", style='compact') == "user_2abcx"
    assert sanitize_for_path("  spaced   out  ") == "spaced_out"
    assert sanitize_for_path("") == ""
    assert sanitize_for_path("a" * 80, max_len=10) == "a" * 10


def test_user_storage_key_is_a_safe_directory_name():
    key = user_storage_key("../../etc")
    assert len(key) == 64
    assert all(c in "0123456789abcdef" for c in key)
    assert user_storage_key("../../etc") == key


@pytest.mark.parametrize("first, second", [
    ("alice.smith", "alicesmith"),
    ("user 1", "user_1"),
    ("u" * 64 + "A", "u" * 64 + "B"),
    ("User_1", "user_1"),
])
def test_user_storage_key_keeps_distinct_ids_apart(first, second):
    assert user_storage_key(first) != user_storage_key(second)


@pytest.mark.parametrize("user_id", ["", "   ", None, 42])
def test_user_storage_key_blank_ids(user_id):
    assert user_storage_key(user_id) == ""
