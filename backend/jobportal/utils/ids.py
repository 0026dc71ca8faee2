import re
import uuid
from datetime import datetime, timezone

OBJECT_ID_RE = re.compile(r"[0-9a-fA-F]{24}")


def new_id() -> str:
    """24 hex characters, the same shape clients already validate job ids against."""
    return uuid.uuid4().hex[:24]


def is_valid_id(value: str) -> bool:
    return bool(OBJECT_ID_RE.fullmatch(value))


def utc_now() -> str:
    # Microseconds keep newest-first ordering stable within one second
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
