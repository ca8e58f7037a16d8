"""
Legacy admin session cookie.

Value: base64url(payload) + "." + base64url(HMAC-SHA256(secret, base64url(payload)))
Payload: {"u": "admin", "t": <epoch ms>}. Only the subject "admin" is accepted.
"""

from __future__ import annotations
import base64
import hashlib
import hmac
import json
import time
from typing import Any, Dict, Optional

COOKIE_NAME = "admin_session"
ADMIN_SUBJECT = "admin"


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64url_decode(value: str) -> bytes:
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def sign(value: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), value.encode("utf-8"), hashlib.sha256).digest()
    return _b64url_encode(digest)


def create_session_value(username: str, secret: str, now_ms: Optional[int] = None) -> str:
    payload = json.dumps(
        {"u": username, "t": now_ms if now_ms is not None else int(time.time() * 1000)},
        separators=(",", ":"),
    )
    val = _b64url_encode(payload.encode("utf-8"))
    return f"{val}.{sign(val, secret)}"


def verify_session_value(cookie_value: Optional[str], secret: str) -> Optional[Dict[str, Any]]:
    """Payload for a valid admin cookie, None for anything else."""
    if not cookie_value:
        return None
    parts = cookie_value.split(".")
    if len(parts) != 2:
        return None
    val, sig = parts
    if not hmac.compare_digest(sig.encode("utf-8"), sign(val, secret).encode("utf-8")):
        return None
    try:
        payload = json.loads(_b64url_decode(val).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(payload, dict) or payload.get("u") != ADMIN_SUBJECT:
        return None
    return payload
