from typing import List, Optional

from fastapi import APIRouter, Depends

from db.database import get_db, next_height, transaction
from models.milestone import Milestone, MilestoneCreate, PrerequisiteCreate, PrerequisiteEdge
from utils.auth import require_caller
from utils.milestones import (
    add_prerequisite,
    create_milestone,
    get_milestone,
    get_prerequisite,
    prerequisites_of,
)

router = APIRouter()

@router.post("")
def new_milestone(payload: MilestoneCreate, caller: str = Depends(require_caller), conn = Depends(get_db)):
    """Create a milestone in a forest and return its id."""
    with transaction(conn):
        height = next_height(conn)
        milestone_id = create_milestone(
            conn,
            caller,
            payload.title,
            payload.description,
            payload.category,
            payload.difficulty,
            payload.forest_id,
            payload.parent_milestone_id,
            height,
        )
    return {"id": milestone_id}

@router.get("/{milestone_id}", response_model=Optional[Milestone])
def read_milestone(milestone_id: int, conn = Depends(get_db)):
    return get_milestone(conn, milestone_id)

@router.post("/{milestone_id}/prerequisites")
def new_prerequisite(
    milestone_id: int,
    payload: PrerequisiteCreate,
    caller: str = Depends(require_caller),
    conn = Depends(get_db),
):
    with transaction(conn):
        height = next_height(conn)
        ok = add_prerequisite(conn, caller, milestone_id, payload.prerequisite_id, height)
    return {"ok": ok}

@router.get("/{milestone_id}/prerequisites", response_model=List[PrerequisiteEdge])
def read_prerequisites(milestone_id: int, conn = Depends(get_db)):
    return prerequisites_of(conn, milestone_id)

@router.get("/{milestone_id}/prerequisites/{prerequisite_id}", response_model=Optional[PrerequisiteEdge])
def read_prerequisite(milestone_id: int, prerequisite_id: int, conn = Depends(get_db)):
    return get_prerequisite(conn, milestone_id, prerequisite_id)
