from typing import Optional

from fastapi import APIRouter, Depends

from config import get_ledger_owner
from db.database import get_db, next_height, transaction
from models.completion import Completion, CompletionCreate, SelfCompletionCreate
from utils.auth import require_caller
from utils.completions import complete, get_completion, is_completed, self_complete

router = APIRouter()

@router.post("")
def verify_completion(payload: CompletionCreate, caller: str = Depends(require_caller), conn = Depends(get_db)):
    """A guardian (or the ledger owner) verifies a child's completion."""
    owner = get_ledger_owner()
    with transaction(conn):
        height = next_height(conn)
        ok = complete(conn, caller, payload.milestone_id, payload.child_id, payload.evidence_url, height, owner=owner)
    return {"ok": ok}

@router.post("/self")
def verify_own_completion(
    payload: SelfCompletionCreate,
    caller: str = Depends(require_caller),
    conn = Depends(get_db),
):
    with transaction(conn):
        height = next_height(conn)
        ok = self_complete(conn, caller, payload.milestone_id, payload.evidence_url, height)
    return {"ok": ok}

@router.get("/{milestone_id}/{user_id}", response_model=Optional[Completion])
def read_completion(milestone_id: int, user_id: str, conn = Depends(get_db)):
    return get_completion(conn, milestone_id, user_id)

@router.get("/{milestone_id}/{user_id}/status")
def read_completion_status(milestone_id: int, user_id: str, conn = Depends(get_db)):
    return {"completed": is_completed(conn, milestone_id, user_id)}
