from typing import Optional

from fastapi import APIRouter, Depends

from db.database import get_db, next_height, transaction
from models.user import User, UserCreate
from utils.auth import require_caller
from utils.users import get_user, register

router = APIRouter()

@router.post("/register")
def register_user(payload: UserCreate, caller: str = Depends(require_caller), conn = Depends(get_db)):
    """Register the calling principal with a role."""
    with transaction(conn):
        height = next_height(conn)
        ok = register(conn, caller, payload.name, payload.role, height)
    return {"ok": ok}

@router.get("/{principal}", response_model=Optional[User])
def read_user(principal: str, conn = Depends(get_db)):
    return get_user(conn, principal)
