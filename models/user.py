from pydantic import BaseModel, Field
from enum import IntEnum

class Role(IntEnum):
    ADMIN = 1
    PARENT = 2
    EDUCATOR = 3
    CHILD = 4

class UserCreate(BaseModel):
    name: str
    # Plain int so out-of-range roles reach the ledger and get InvalidUserRole
    role: int = Field(..., description="1=admin, 2=parent, 3=educator, 4=child")

class User(BaseModel):
    principal: str
    name: str
    role: Role
    registered_at: int

    class Config:
        from_attributes = True
