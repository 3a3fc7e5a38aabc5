from typing import List, Optional

from fastapi import APIRouter, Depends

from db.database import get_db, next_height, transaction
from models.relationship import Relationship, RelationshipCreate
from utils.auth import require_caller
from utils.relationships import create_relationship, get_relationship, list_children

router = APIRouter()

@router.post("")
def link_child(payload: RelationshipCreate, caller: str = Depends(require_caller), conn = Depends(get_db)):
    """Link the calling guardian to a child."""
    with transaction(conn):
        height = next_height(conn)
        ok = create_relationship(conn, caller, payload.child_id, payload.kind, height)
    return {"ok": ok}

@router.get("/{guardian}", response_model=List[Relationship])
def read_children(guardian: str, conn = Depends(get_db)):
    return list_children(conn, guardian)

@router.get("/{guardian}/{child}", response_model=Optional[Relationship])
def read_relationship(guardian: str, child: str, conn = Depends(get_db)):
    return get_relationship(conn, guardian, child)
