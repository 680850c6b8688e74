"""Pydantic schemas for task request/response validation."""

from pydantic import BaseModel, ConfigDict, computed_field
from datetime import datetime
from typing import Optional, List, Union

from planner.core.timeutil import format_minutes
from planner.schemas.activity_log import ActivityLogResponse
from planner.schemas.attachment import AttachmentResponse
from planner.schemas.label import LabelResponse
from planner.schemas.reminder import ReminderResponse
from planner.schemas.task_list import ListResponse

# Les dates arrivent en epoch ms, en ISO-8601 ou en datetime; les durées en minutes ou "HH:MM"
DateField = Optional[Union[int, datetime, str]]
DurationField = Optional[Union[int, str]]


class TaskCreate(BaseModel):
    name: str
    list_id: Optional[str] = None
    no_list: bool = False
    description: Optional[str] = None
    date: DateField = None
    deadline: DateField = None
    estimate: DurationField = None
    actual_time: DurationField = None
    priority: str = "none"
    recurrence: Optional[str] = None
    recurrence_pattern: Optional[str] = None
    labels: Optional[List[str]] = None  # ids ou noms de labels


class TaskUpdate(BaseModel):
    name: Optional[str] = None
    list_id: Optional[str] = None
    description: Optional[str] = None
    date: DateField = None
    deadline: DateField = None
    estimate: DurationField = None
    actual_time: DurationField = None
    priority: Optional[str] = None
    completed: Optional[bool] = None
    recurrence: Optional[str] = None
    recurrence_pattern: Optional[str] = None
    position: Optional[int] = None


class SubtaskCreate(BaseModel):
    name: str


class SubtaskUpdate(BaseModel):
    completed: bool


class SubtaskResponse(BaseModel):
    id: str
    parent_task_id: str
    list_id: str
    name: str
    completed: bool
    completed_at: Optional[int]
    position: int
    created_at: int
    updated_at: int

    model_config = ConfigDict(from_attributes=True)


class TaskResponse(BaseModel):
    id: str
    list_id: str
    parent_task_id: Optional[str]
    name: str
    description: Optional[str]
    date: Optional[int]
    deadline: Optional[int]
    estimate: Optional[int]
    actual_time: Optional[int]
    priority: str
    completed: bool
    completed_at: Optional[int]
    recurrence: Optional[str]
    recurrence_pattern: Optional[str]
    position: int
    created_at: int
    updated_at: int
    labels: List[LabelResponse] = []
    subtasks: List[SubtaskResponse] = []

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def estimate_hhmm(self) -> Optional[str]:
        return format_minutes(self.estimate)

    @computed_field
    @property
    def actual_time_hhmm(self) -> Optional[str]:
        return format_minutes(self.actual_time)


class TaskDetailResponse(TaskResponse):
    """Tâche avec toutes ses relations (vue détail)"""

    task_list: Optional[ListResponse] = None
    reminders: List[ReminderResponse] = []
    attachments: List[AttachmentResponse] = []
    activity_logs: List[ActivityLogResponse] = []
