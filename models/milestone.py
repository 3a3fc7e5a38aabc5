from pydantic import BaseModel
from typing import Optional

class MilestoneBase(BaseModel):
    title: str
    description: str = ""
    category: str = ""
    difficulty: int
    forest_id: int
    parent_milestone_id: Optional[int] = None  # display nesting, not a prerequisite

class MilestoneCreate(MilestoneBase):
    pass

class Milestone(MilestoneBase):
    id: int
    creator: str
    created_at: int

    class Config:
        from_attributes = True

class PrerequisiteCreate(BaseModel):
    prerequisite_id: int

class PrerequisiteEdge(BaseModel):
    milestone_id: int
    prerequisite_id: int
    created_at: int

    class Config:
        from_attributes = True
