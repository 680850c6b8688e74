from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Union

class ReminderCreate(BaseModel):
    reminder_time: Union[int, datetime, str]

class ReminderResponse(BaseModel):
    id: str
    task_id: str
    reminder_time: int
    created_at: int

    model_config = ConfigDict(from_attributes=True)
