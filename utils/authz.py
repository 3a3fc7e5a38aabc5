"""Authorization checks shared by every mutating ledger operation."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from models.user import Role
from utils.errors import ErrorCode, LedgerError

logger = logging.getLogger(__name__)

CREATOR_ROLES = frozenset({Role.ADMIN, Role.EDUCATOR, Role.PARENT})
GUARDIAN_ROLES = frozenset({Role.EDUCATOR, Role.PARENT})


def get_role(conn, principal: str) -> Optional[Role]:
    cursor = conn.cursor()
    cursor.execute("SELECT role FROM users WHERE principal = ?", (principal,))
    row = cursor.fetchone()
    if not row:
        return None
    return Role(row[0])


def has_role(conn, principal: str, roles: Iterable[Role]) -> bool:
    """True when the principal is registered with one of ``roles``."""
    role = get_role(conn, principal)
    return role is not None and role in set(roles)


def require_role(
    conn,
    principal: str,
    roles: Iterable[Role],
    error: ErrorCode = ErrorCode.NOT_AUTHORIZED,
) -> Role:
    allowed = set(roles)
    role = get_role(conn, principal)
    if role is None or role not in allowed:
        logger.info("Rejected %s: role %s not in %s", principal, role, sorted(int(r) for r in allowed))
        raise LedgerError(error)
    return role


def is_guardian_of(conn, guardian: str, child: str) -> bool:
    """Relationships are directed: only guardian -> child is looked up."""
    cursor = conn.cursor()
    cursor.execute(
        "SELECT 1 FROM relationships WHERE guardian = ? AND child = ?",
        (guardian, child),
    )
    return cursor.fetchone() is not None


def prerequisites_satisfied(conn, milestone_id: int, user_id: str) -> bool:
    """All prerequisite edges of the milestone have a completion for the user.

    Stops at the first missing completion. A milestone without prerequisites
    always passes.
    """
    cursor = conn.cursor()
    cursor.execute(
        "SELECT prerequisite_id FROM milestone_prerequisites WHERE milestone_id = ? ORDER BY prerequisite_id",
        (milestone_id,),
    )
    for row in cursor.fetchall():
        check = conn.execute(
            "SELECT 1 FROM completions WHERE milestone_id = ? AND user_principal = ?",
            (row[0], user_id),
        )
        if check.fetchone() is None:
            return False
    return True
