from pydantic import BaseModel, ConfigDict
from typing import Any, Dict

class ActivityLogResponse(BaseModel):
    id: str
    task_id: str
    action: str
    changes: Dict[str, Any]
    created_at: int

    model_config = ConfigDict(from_attributes=True)
