from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from planner.core.database import get_db
from planner.schemas.task import TaskResponse
from planner.services.search_service import search_tasks

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=List[TaskResponse])
#recherche dans les tâches (nom, description, liste, labels)
def search(
    q: str = Query(""),
    mode: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    results = search_tasks(db, q, mode=mode)
    return [TaskResponse.model_validate(t) for t in results]
