from pydantic import BaseModel

class ForestBase(BaseModel):
    name: str
    description: str = ""

class ForestCreate(ForestBase):
    pass

class Forest(ForestBase):
    id: int
    creator: str
    created_at: int

    class Config:
        from_attributes = True
