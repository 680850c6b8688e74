from pydantic import BaseModel, ConfigDict
from typing import Optional

# Schemas labels

class LabelCreate(BaseModel):
    name: str
    icon: Optional[str] = "🏷️"
    color: Optional[str] = "gray"

class LabelUpdate(BaseModel):
    name: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None

class LabelResponse(BaseModel):
    id: str
    name: str
    icon: str
    color: str
    created_at: int
    updated_at: int

    model_config = ConfigDict(from_attributes=True)
