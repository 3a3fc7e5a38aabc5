"""Completion ledger: one terminal record per (milestone, user)."""
from __future__ import annotations

import logging
from typing import Optional

from models.completion import Completion
from models.user import Role
from utils.authz import is_guardian_of, prerequisites_satisfied, require_role
from utils.errors import ErrorCode, LedgerError
from utils.milestones import milestone_exists
from utils.validation import MAX_EVIDENCE_URL, check_text

logger = logging.getLogger(__name__)


def complete(
    conn,
    caller: str,
    milestone_id: int,
    child_id: str,
    evidence_url: Optional[str],
    height: int,
    owner: Optional[str] = None,
) -> bool:
    """Record that ``child_id`` finished a milestone, verified by the caller.

    The caller must be the ledger owner or a guardian linked to the child.
    """
    if not (owner and caller == owner) and not is_guardian_of(conn, caller, child_id):
        logger.info("Rejected completion of %s for %s by %s: not authorized", milestone_id, child_id, caller)
        raise LedgerError(ErrorCode.NOT_AUTHORIZED)
    _record_completion(conn, caller, milestone_id, child_id, evidence_url, height)
    return True


def self_complete(
    conn,
    caller: str,
    milestone_id: int,
    evidence_url: Optional[str],
    height: int,
) -> bool:
    """A child records its own completion and is its own verifier."""
    require_role(conn, caller, {Role.CHILD}, error=ErrorCode.INVALID_USER_ROLE)
    _record_completion(conn, caller, milestone_id, caller, evidence_url, height)
    return True


def _record_completion(
    conn,
    verifier: str,
    milestone_id: int,
    user_id: str,
    evidence_url: Optional[str],
    height: int,
) -> None:
    if not milestone_exists(conn, milestone_id):
        raise LedgerError(ErrorCode.MILESTONE_NOT_FOUND)
    if is_completed(conn, milestone_id, user_id):
        raise LedgerError(ErrorCode.MILESTONE_ALREADY_COMPLETED)
    if not prerequisites_satisfied(conn, milestone_id, user_id):
        logger.info("Milestone %s blocked for %s: prerequisites missing", milestone_id, user_id)
        raise LedgerError(ErrorCode.PREREQUISITES_NOT_COMPLETED)
    check_text(evidence_url, MAX_EVIDENCE_URL)
    conn.execute(
        """
        INSERT INTO completions (milestone_id, user_principal, completed_at, verifier, evidence_url)
        VALUES (?, ?, ?, ?, ?)
        """,
        (milestone_id, user_id, height, verifier, evidence_url),
    )
    logger.info("Milestone %s completed by %s, verified by %s", milestone_id, user_id, verifier)


def is_completed(conn, milestone_id: int, user_id: str) -> bool:
    cursor = conn.cursor()
    cursor.execute(
        "SELECT 1 FROM completions WHERE milestone_id = ? AND user_principal = ?",
        (milestone_id, user_id),
    )
    return cursor.fetchone() is not None


def get_completion(conn, milestone_id: int, user_id: str) -> Optional[Completion]:
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT milestone_id, user_principal, completed_at, verifier, evidence_url
        FROM completions
        WHERE milestone_id = ? AND user_principal = ?
        """,
        (milestone_id, user_id),
    )
    row = cursor.fetchone()
    if not row:
        return None
    return Completion(**dict(row))
