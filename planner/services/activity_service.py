"""
Journal d'activité des tâches (audit append-only).

Le log est écrit APRES le commit de la mutation: une erreur d'écriture est
loggée mais ne défait jamais la mutation déjà validée.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from planner.core.config import settings
from planner.core.timeutil import generate_id, now_ms
from planner.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)

MAX_ACTIVITY_LIMIT = 500


def log_change(db: Session, task_id: str, action: str, payload: Optional[Dict[str, Any]] = None) -> Optional[ActivityLog]:
    entry = ActivityLog(
        id=generate_id(),
        task_id=task_id,
        action=action,
        changes=payload or {},
        created_at=now_ms(),
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Activity log write failed task=%s action=%s", task_id, action)
        return None
    return entry


def diff_fields(current: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    # {champ: {"old": .., "new": ..}} seulement pour les valeurs qui changent vraiment
    diff = {}
    for field, new_value in changes.items():
        old_value = current.get(field)
        if old_value != new_value:
            diff[field] = {"old": old_value, "new": new_value}
    return diff


def list_activity(db: Session, task_id: Optional[str] = None, limit: Optional[int] = None) -> List[ActivityLog]:
    if limit is None:
        limit = settings.ACTIVITY_LOG_LIMIT
    limit = max(1, min(limit, MAX_ACTIVITY_LIMIT))

    query = db.query(ActivityLog)
    if task_id:
        query = query.filter(ActivityLog.task_id == task_id)

    return query.order_by(ActivityLog.created_at.desc(), ActivityLog.id).limit(limit).all()
