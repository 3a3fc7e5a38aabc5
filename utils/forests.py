"""Forest registry: named collections of milestones."""
from __future__ import annotations

import logging
from typing import Optional

from db.database import next_counter_value
from models.forest import Forest
from utils.authz import CREATOR_ROLES, require_role
from utils.validation import MAX_DESCRIPTION, MAX_FOREST_NAME, check_text

logger = logging.getLogger(__name__)


def create_forest(conn, caller: str, name: str, description: str, height: int) -> int:
    require_role(conn, caller, CREATOR_ROLES)
    check_text(name, MAX_FOREST_NAME, required=True)
    check_text(description, MAX_DESCRIPTION)
    forest_id = next_counter_value(conn, "forest")
    conn.execute(
        """
        INSERT INTO forests (id, name, description, creator, created_at)
        VALUES (?, ?, ?, ?, ?)
        """,
        (forest_id, name, description or "", caller, height),
    )
    logger.info("Forest %s (%r) created by %s", forest_id, name, caller)
    return forest_id


def get_forest(conn, forest_id: int) -> Optional[Forest]:
    cursor = conn.cursor()
    cursor.execute(
        "SELECT id, name, description, creator, created_at FROM forests WHERE id = ?",
        (forest_id,),
    )
    row = cursor.fetchone()
    if not row:
        return None
    return Forest(**dict(row))
