from pydantic import BaseModel
from typing import Optional

class SelfCompletionCreate(BaseModel):
    milestone_id: int
    evidence_url: Optional[str] = None

class CompletionCreate(SelfCompletionCreate):
    child_id: str

class Completion(BaseModel):
    milestone_id: int
    user_principal: str
    completed_at: int
    verifier: str
    evidence_url: Optional[str] = None

    class Config:
        from_attributes = True
