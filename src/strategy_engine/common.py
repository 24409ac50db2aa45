"""Shared helpers for record ids and timestamps."""

import uuid
from datetime import datetime


def new_id(prefix: str) -> str:
    """Generate an opaque record id such as ``obj-3f2a9c1d04be``."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def today() -> str:
    """Today's date as YYYY-MM-DD."""
    return datetime.now().strftime("%Y-%m-%d")


def now_iso() -> str:
    """Current timestamp in ISO format."""
    return datetime.now().isoformat()
