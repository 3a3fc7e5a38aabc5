from __future__ import annotations

import hashlib
import hmac
import logging
import time
from typing import Optional

from fastapi import HTTPException, Request, status

from config import load_config

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "ledger_session"
BEARER_PREFIX = "Bearer "


def _get_auth_config() -> dict:
    config = load_config()
    return config.get("auth", {})


def get_auth_secret() -> Optional[str]:
    secret = _get_auth_config().get("secret")
    return secret or None


def get_token_minutes() -> int:
    minutes = _get_auth_config().get("token_minutes", 60)
    try:
        return int(minutes)
    except (TypeError, ValueError):
        return 60


def _sign(secret: str, payload: str) -> str:
    key = hashlib.sha256(secret.encode("utf-8")).digest()
    return hmac.new(key, payload.encode("utf-8"), hashlib.sha256).hexdigest()


def create_caller_token(principal: str, secret: str, duration_minutes: int) -> str:
    """Mint ``principal:expires_at:signature`` for an authenticated principal."""
    if not principal or ":" in principal:
        raise ValueError("Principal must be non-empty and contain no ':'")
    if not secret:
        raise ValueError("Auth secret is not configured")
    expires_at = int(time.time()) + int(duration_minutes) * 60
    payload = f"{principal}:{expires_at}"
    return f"{payload}:{_sign(secret, payload)}"


def verify_caller_token(token: Optional[str], secret: Optional[str]) -> Optional[str]:
    """Return the principal for a valid, unexpired token, otherwise None."""
    if not token or not secret:
        return None
    try:
        principal, expires_str, signature = token.rsplit(":", 2)
    except ValueError:
        return None
    expected = _sign(secret, f"{principal}:{expires_str}")
    if not hmac.compare_digest(signature, expected):
        return None
    try:
        expires_at = int(expires_str)
    except ValueError:
        return None
    if expires_at < int(time.time()):
        return None
    return principal or None


def _token_from_request(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.startswith(BEARER_PREFIX):
        return header[len(BEARER_PREFIX):].strip()
    return request.cookies.get(SESSION_COOKIE_NAME)


def require_caller(request: Request) -> str:
    """FastAPI dependency returning the authenticated caller principal."""
    principal = verify_caller_token(_token_from_request(request), get_auth_secret())
    if principal:
        return principal
    logger.debug("Rejected request to %s without a valid caller token", request.url.path)
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Caller token required")
