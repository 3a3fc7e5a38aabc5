from typing import List, Optional

from fastapi import APIRouter, Depends

from db.database import get_db, next_height, transaction
from models.forest import Forest, ForestCreate
from models.milestone import Milestone
from utils.auth import require_caller
from utils.forests import create_forest, get_forest
from utils.milestones import list_forest_milestones

router = APIRouter()

@router.post("")
def new_forest(payload: ForestCreate, caller: str = Depends(require_caller), conn = Depends(get_db)):
    """Create a forest and return its id."""
    with transaction(conn):
        height = next_height(conn)
        forest_id = create_forest(conn, caller, payload.name, payload.description, height)
    return {"id": forest_id}

@router.get("/{forest_id}", response_model=Optional[Forest])
def read_forest(forest_id: int, conn = Depends(get_db)):
    return get_forest(conn, forest_id)

@router.get("/{forest_id}/milestones", response_model=List[Milestone])
def read_forest_milestones(forest_id: int, conn = Depends(get_db)):
    """Milestones of a forest in creation order, for tree display."""
    return list_forest_milestones(conn, forest_id)
