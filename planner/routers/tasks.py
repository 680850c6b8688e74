from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from planner.core.database import get_db
from planner.schemas.attachment import AttachmentCreate, AttachmentResponse
from planner.schemas.reminder import ReminderCreate, ReminderResponse
from planner.schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskResponse,
    TaskDetailResponse,
    SubtaskCreate,
    SubtaskResponse,
)
from planner.services import task_service
from planner.services.search_service import search_tasks
from planner.services.view_service import (
    count_overdue_tasks,
    get_next_7_days_tasks,
    get_overdue_tasks,
    get_today_tasks,
    get_upcoming_tasks,
    get_view_tasks,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _to_response(tasks) -> List[TaskResponse]:
    return [TaskResponse.model_validate(t) for t in tasks]


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(task_data: TaskCreate, db: Session = Depends(get_db)):
    task = task_service.create_task(db, **task_data.model_dump())
    return TaskResponse.model_validate(task)


@router.get("", response_model=List[TaskResponse])
def list_tasks(
    db: Session = Depends(get_db),
    view: str = Query("all"),
    list_id: Optional[str] = Query(None),
    label_id: Optional[str] = Query(None),
    show_completed: bool = Query(False),
    query: Optional[str] = Query(None)
):
    # recherche > liste > label > vue
    if query:
        tasks = search_tasks(db, query)
        if not show_completed:
            tasks = [t for t in tasks if not t.completed]
        return _to_response(tasks)

    return _to_response(get_view_tasks(
        db,
        view,
        list_id=list_id,
        label_id=label_id,
        show_completed=show_completed
    ))


@router.get("/today", response_model=List[TaskResponse])
def today(db: Session = Depends(get_db), show_completed: bool = Query(False)):
    return _to_response(get_today_tasks(db, show_completed=show_completed))


@router.get("/next-7-days", response_model=List[TaskResponse])
def next_7_days(db: Session = Depends(get_db), show_completed: bool = Query(False)):
    return _to_response(get_next_7_days_tasks(db, show_completed=show_completed))


@router.get("/upcoming", response_model=List[TaskResponse])
def upcoming(db: Session = Depends(get_db), show_completed: bool = Query(False)):
    return _to_response(get_upcoming_tasks(db, show_completed=show_completed))


@router.get("/overdue", response_model=List[TaskResponse])
def overdue(db: Session = Depends(get_db)):
    # jamais de tâches terminées ici, show_completed n'a pas de sens
    return _to_response(get_overdue_tasks(db))


@router.get("/overdue/count")
def overdue_count(db: Session = Depends(get_db)):
    return {"count": count_overdue_tasks(db)}


@router.get("/{task_id}", response_model=TaskDetailResponse)
def get_task(task_id: str, db: Session = Depends(get_db)):
    task = task_service.get_task_detail(db, task_id)
    if not task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return TaskDetailResponse.model_validate(task)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(task_id: str, task_data: TaskUpdate, db: Session = Depends(get_db)):
    # seuls les champs envoyés sont pris en compte
    update_data = task_data.model_dump(exclude_unset=True)
    task = task_service.update_task(db, task_id, update_data)
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, db: Session = Depends(get_db)):
    task_service.delete_task(db, task_id)


@router.post("/{task_id}/labels/{label_id}", response_model=TaskResponse)
def add_label(task_id: str, label_id: str, db: Session = Depends(get_db)):
    task = task_service.add_label_to_task(db, task_id, label_id)
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}/labels/{label_id}", response_model=TaskResponse)
def remove_label(task_id: str, label_id: str, db: Session = Depends(get_db)):
    task = task_service.remove_label_from_task(db, task_id, label_id)
    return TaskResponse.model_validate(task)


@router.post("/{task_id}/subtasks", response_model=SubtaskResponse, status_code=status.HTTP_201_CREATED)
def create_subtask(task_id: str, subtask_data: SubtaskCreate, db: Session = Depends(get_db)):
    subtask = task_service.create_subtask(db, task_id, subtask_data.name)
    return SubtaskResponse.model_validate(subtask)


@router.get("/{task_id}/reminders", response_model=List[ReminderResponse])
def list_reminders(task_id: str, db: Session = Depends(get_db)):
    return task_service.list_reminders(db, task_id)


@router.post("/{task_id}/reminders", response_model=ReminderResponse, status_code=status.HTTP_201_CREATED)
def add_reminder(task_id: str, reminder_data: ReminderCreate, db: Session = Depends(get_db)):
    reminder = task_service.add_reminder(db, task_id, reminder_data.reminder_time)
    return ReminderResponse.model_validate(reminder)


@router.get("/{task_id}/attachments", response_model=List[AttachmentResponse])
def list_attachments(task_id: str, db: Session = Depends(get_db)):
    return task_service.list_attachments(db, task_id)


@router.post("/{task_id}/attachments", response_model=AttachmentResponse, status_code=status.HTTP_201_CREATED)
def add_attachment(task_id: str, attachment_data: AttachmentCreate, db: Session = Depends(get_db)):
    attachment = task_service.add_attachment(db, task_id, **attachment_data.model_dump())
    return AttachmentResponse.model_validate(attachment)
