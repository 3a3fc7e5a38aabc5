"""Identity & role registry."""
from __future__ import annotations

import logging
from typing import Optional

from models.user import Role, User
from utils.errors import ErrorCode, LedgerError
from utils.validation import MAX_USER_NAME, check_text

logger = logging.getLogger(__name__)


def register(conn, caller: str, name: str, role: int, height: int) -> bool:
    """Register the caller once. Role and name can never change afterwards."""
    if isinstance(role, bool) or not isinstance(role, int) or not Role.ADMIN <= role <= Role.CHILD:
        raise LedgerError(ErrorCode.INVALID_USER_ROLE)
    if get_user(conn, caller) is not None:
        raise LedgerError(ErrorCode.MILESTONE_ALREADY_EXISTS)
    check_text(name, MAX_USER_NAME, required=True)
    conn.execute(
        "INSERT INTO users (principal, name, role, registered_at) VALUES (?, ?, ?, ?)",
        (caller, name, int(role), height),
    )
    logger.info("Registered %s as %s at height %s", caller, Role(role).name.lower(), height)
    return True


def get_user(conn, principal: str) -> Optional[User]:
    cursor = conn.cursor()
    cursor.execute(
        "SELECT principal, name, role, registered_at FROM users WHERE principal = ?",
        (principal,),
    )
    row = cursor.fetchone()
    if not row:
        return None
    return User(**dict(row))
