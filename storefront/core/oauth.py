"""
OAuth-backed admin session.

The identity provider handshake happens outside this service; once it has
verified a user, `issue_oauth_session` turns the identity into a signed,
time-limited cookie value. Only emails on ADMIN_EMAILS get a session.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from storefront.core.config import Settings

logger = logging.getLogger(__name__)

OAUTH_COOKIE_NAME = "oauth_session"
_SALT = "storefront-oauth-session"


@dataclass(frozen=True)
class AdminIdentity:
    email: str
    name: str
    source: str     # "oauth" or "legacy"


def _serializer(settings: Settings) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(settings.oauth_secret, salt=_SALT)


def is_admin_email(email: str, settings: Settings) -> bool:
    return bool(email) and email.strip().lower() in settings.admin_emails


def issue_oauth_session(email: str, name: str, settings: Settings) -> Optional[str]:
    """Signed session token, or None when the email is not an admin."""
    if not is_admin_email(email, settings):
        logger.info("oauth sign-in rejected for non-admin email")
        return None
    return _serializer(settings).dumps({"email": email.strip(), "name": name, "isAdmin": True})


def verify_oauth_session(token: Optional[str], settings: Settings) -> Optional[AdminIdentity]:
    if not token:
        return None
    try:
        data = _serializer(settings).loads(token, max_age=settings.SESSION_MAX_AGE)
    except SignatureExpired:
        logger.info("oauth session expired")
        return None
    except BadSignature:
        return None
    if not isinstance(data, dict) or not data.get("isAdmin"):
        return None
    email = str(data.get("email") or "")
    # valid only while the email is still on the allow-list
    if not is_admin_email(email, settings):
        return None
    return AdminIdentity(email=email, name=str(data.get("name") or ""), source="oauth")
