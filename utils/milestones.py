"""Milestone graph: nodes grouped into forests plus prerequisite edges.

A milestone's ``parent_milestone_id`` only nests it for display. Completion is
gated by the separate prerequisite edge set. Edges are never removed and
cycles across longer chains are not rejected: a milestone caught in a cycle
simply can never be completed.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from db.database import next_counter_value
from models.milestone import Milestone, PrerequisiteEdge
from utils.authz import CREATOR_ROLES, require_role
from utils.errors import ErrorCode, LedgerError
from utils.forests import get_forest
from utils.validation import (
    MAX_CATEGORY,
    MAX_DESCRIPTION,
    MAX_MILESTONE_TITLE,
    check_difficulty,
    check_text,
)

logger = logging.getLogger(__name__)

MILESTONE_COLUMNS = """
    id, title, description, category, difficulty, forest_id,
    parent_milestone_id, creator, created_at
"""


def create_milestone(
    conn,
    caller: str,
    title: str,
    description: str,
    category: str,
    difficulty: int,
    forest_id: int,
    parent_milestone_id: Optional[int],
    height: int,
) -> int:
    require_role(conn, caller, CREATOR_ROLES)
    if get_forest(conn, forest_id) is None:
        raise LedgerError(ErrorCode.FOREST_NOT_FOUND)
    check_difficulty(difficulty)
    if parent_milestone_id is not None and not milestone_exists(conn, parent_milestone_id):
        raise LedgerError(ErrorCode.PARENT_MILESTONE_NOT_FOUND)
    check_text(title, MAX_MILESTONE_TITLE, required=True)
    check_text(description, MAX_DESCRIPTION)
    check_text(category, MAX_CATEGORY)
    milestone_id = next_counter_value(conn, "milestone")
    conn.execute(
        f"""
        INSERT INTO milestones ({MILESTONE_COLUMNS})
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            milestone_id,
            title,
            description or "",
            category or "",
            difficulty,
            forest_id,
            parent_milestone_id,
            caller,
            height,
        ),
    )
    logger.info("Milestone %s (%r) created in forest %s by %s", milestone_id, title, forest_id, caller)
    return milestone_id


def add_prerequisite(conn, caller: str, milestone_id: int, prerequisite_id: int, height: int) -> bool:
    """Require ``prerequisite_id`` before ``milestone_id``.

    Adding an edge that already exists only refreshes its ``created_at``.
    """
    require_role(conn, caller, CREATOR_ROLES)
    if not milestone_exists(conn, milestone_id) or not milestone_exists(conn, prerequisite_id):
        raise LedgerError(ErrorCode.MILESTONE_NOT_FOUND)
    if milestone_id == prerequisite_id:
        raise LedgerError(ErrorCode.INVALID_PARAMETERS)
    conn.execute(
        """
        INSERT INTO milestone_prerequisites (milestone_id, prerequisite_id, created_at)
        VALUES (?, ?, ?)
        ON CONFLICT (milestone_id, prerequisite_id) DO UPDATE SET created_at = excluded.created_at
        """,
        (milestone_id, prerequisite_id, height),
    )
    logger.info("Milestone %s now requires %s", milestone_id, prerequisite_id)
    return True


def milestone_exists(conn, milestone_id: int) -> bool:
    cursor = conn.cursor()
    cursor.execute("SELECT 1 FROM milestones WHERE id = ?", (milestone_id,))
    return cursor.fetchone() is not None


def get_milestone(conn, milestone_id: int) -> Optional[Milestone]:
    cursor = conn.cursor()
    cursor.execute(f"SELECT {MILESTONE_COLUMNS} FROM milestones WHERE id = ?", (milestone_id,))
    row = cursor.fetchone()
    if not row:
        return None
    return Milestone(**dict(row))


def list_forest_milestones(conn, forest_id: int) -> List[Milestone]:
    cursor = conn.cursor()
    cursor.execute(
        f"SELECT {MILESTONE_COLUMNS} FROM milestones WHERE forest_id = ? ORDER BY id",
        (forest_id,),
    )
    return [Milestone(**dict(row)) for row in cursor.fetchall()]


def get_prerequisite(conn, milestone_id: int, prerequisite_id: int) -> Optional[PrerequisiteEdge]:
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT milestone_id, prerequisite_id, created_at
        FROM milestone_prerequisites
        WHERE milestone_id = ? AND prerequisite_id = ?
        """,
        (milestone_id, prerequisite_id),
    )
    row = cursor.fetchone()
    if not row:
        return None
    return PrerequisiteEdge(**dict(row))


def prerequisites_of(conn, milestone_id: int) -> List[PrerequisiteEdge]:
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT milestone_id, prerequisite_id, created_at
        FROM milestone_prerequisites
        WHERE milestone_id = ?
        ORDER BY prerequisite_id
        """,
        (milestone_id,),
    )
    return [PrerequisiteEdge(**dict(row)) for row in cursor.fetchall()]
