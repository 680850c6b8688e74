from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from planner.core.database import get_db
from planner.schemas.activity_log import ActivityLogResponse
from planner.services.activity_service import list_activity

router = APIRouter(prefix="/activity-logs", tags=["activity"])


@router.get("", response_model=List[ActivityLogResponse])
def recent_activity(
    db: Session = Depends(get_db),
    task_id: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=500)
):
    return list_activity(db, task_id=task_id, limit=limit)
