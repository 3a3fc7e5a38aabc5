from pydantic import BaseModel
from enum import Enum

class RelationshipKind(str, Enum):
    PARENT_CHILD = "parent-child"
    EDUCATOR_CHILD = "educator-child"

class RelationshipCreate(BaseModel):
    child_id: str
    kind: str

class Relationship(BaseModel):
    guardian: str
    child: str
    kind: RelationshipKind
    created_at: int

    class Config:
        from_attributes = True
