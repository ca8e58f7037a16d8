"""Record id and timestamp helpers."""

from __future__ import annotations
import secrets
import time
from datetime import datetime, timezone

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id(prefix: str) -> str:
    """
    Subtype prefix + base36 millisecond timestamp + 4 random base36 chars,
    e.g. 'k_m2x9c1q0ab3f'. Collisions are not checked.
    """
    suffix = "".join(secrets.choice(_BASE36) for _ in range(4))
    return f"{prefix}{to_base36(time.time_ns() // 1_000_000)}{suffix}"


def utc_now_iso() -> str:
    """ISO-8601 UTC with millisecond precision and a 'Z' suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
