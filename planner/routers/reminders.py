from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from planner.core.database import get_db
from planner.services import task_service

router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.delete("/{reminder_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reminder(reminder_id: str, db: Session = Depends(get_db)):
    task_service.remove_reminder(db, reminder_id)
