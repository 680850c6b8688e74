from pydantic import BaseModel, ConfigDict
from typing import Optional

# Schemas listes

class ListCreate(BaseModel):
    name: str
    icon: Optional[str] = "📝"
    color: Optional[str] = "gray"

class ListUpdate(BaseModel):
    name: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None

class ListResponse(BaseModel):
    id: str
    name: str
    icon: str
    color: str
    is_default: bool
    created_at: int
    updated_at: int

    model_config = ConfigDict(from_attributes=True)
