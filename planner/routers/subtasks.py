from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from planner.core.database import get_db
from planner.schemas.task import SubtaskUpdate, SubtaskResponse
from planner.services import task_service

router = APIRouter(prefix="/subtasks", tags=["subtasks"])


@router.put("/{subtask_id}", response_model=SubtaskResponse)
def update_subtask(subtask_id: str, subtask_data: SubtaskUpdate, db: Session = Depends(get_db)):
    subtask = task_service.update_subtask_completion(db, subtask_id, subtask_data.completed)
    return SubtaskResponse.model_validate(subtask)


@router.delete("/{subtask_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subtask(subtask_id: str, db: Session = Depends(get_db)):
    task_service.delete_subtask(db, subtask_id)
