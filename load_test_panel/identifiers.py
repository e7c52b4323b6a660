"""Client-side test identifiers of the form ``test_<epoch-ms>_<token>``."""

import re
import secrets
import string
from datetime import datetime, timezone

TEST_ID_PATTERN = re.compile(r"test_\d+_\w+")
TIMESTAMP_PATTERN = re.compile(r"test_(\d+)_")

TOKEN_ALPHABET = string.digits + string.ascii_lowercase
TOKEN_LENGTH = 9


def generate_test_id(now: datetime | None = None) -> str:
    """Create a new identifier embedding the creation time."""
    now = now or datetime.now(timezone.utc)
    epoch_ms = int(now.timestamp() * 1000)
    token = "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))
    return f"test_{epoch_ms}_{token}"


def extract_timestamp(test_id: str) -> datetime | None:
    """Return the creation time embedded in an identifier, if any."""
    if (match := TIMESTAMP_PATTERN.search(test_id)) is None:
        return None
    try:
        return datetime.fromtimestamp(int(match.group(1)) / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def find_test_id(*texts: str | None) -> str | None:
    """Return the first identifier found in the given texts."""
    for text in texts:
        if text and (match := TEST_ID_PATTERN.search(text)):
            return match.group(0)
    return None
