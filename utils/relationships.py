"""Guardian -> child relationship registry."""
from __future__ import annotations

import logging
from typing import List, Optional

from models.relationship import Relationship, RelationshipKind
from models.user import Role
from utils.authz import GUARDIAN_ROLES, get_role, require_role
from utils.errors import ErrorCode, LedgerError

logger = logging.getLogger(__name__)

VALID_KINDS = {kind.value for kind in RelationshipKind}


def create_relationship(conn, caller: str, child_id: str, kind: str, height: int) -> bool:
    """Link the caller (parent or educator) to a registered child.

    The link is keyed by (caller, child) and is not mirrored.
    """
    require_role(conn, caller, GUARDIAN_ROLES)
    if get_role(conn, child_id) != Role.CHILD:
        raise LedgerError(ErrorCode.CHILD_NOT_REGISTERED)
    if kind not in VALID_KINDS:
        raise LedgerError(ErrorCode.INVALID_PARAMETERS)
    if get_relationship(conn, caller, child_id) is not None:
        raise LedgerError(ErrorCode.DUPLICATE_RELATIONSHIP)
    conn.execute(
        "INSERT INTO relationships (guardian, child, kind, created_at) VALUES (?, ?, ?, ?)",
        (caller, child_id, kind, height),
    )
    logger.info("Linked %s -> %s (%s)", caller, child_id, kind)
    return True


def get_relationship(conn, user_id: str, related_user_id: str) -> Optional[Relationship]:
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT guardian, child, kind, created_at
        FROM relationships
        WHERE guardian = ? AND child = ?
        """,
        (user_id, related_user_id),
    )
    row = cursor.fetchone()
    if not row:
        return None
    return Relationship(**dict(row))


def list_children(conn, guardian: str) -> List[Relationship]:
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT guardian, child, kind, created_at
        FROM relationships
        WHERE guardian = ?
        ORDER BY child
        """,
        (guardian,),
    )
    return [Relationship(**dict(row)) for row in cursor.fetchall()]
