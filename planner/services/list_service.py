"""List service"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from planner.core.config import settings
from planner.core.database import commit
from planner.core.errors import InvalidOperation, NotFound, ValidationError
from planner.core.timeutil import generate_id, now_ms
from planner.models.task_list import TaskList

logger = logging.getLogger(__name__)


def ensure_inbox(db: Session) -> TaskList:
    """Crée la liste Inbox (par défaut) si elle n'existe pas encore."""
    inbox = db.query(TaskList).filter(TaskList.is_default == True).first()
    if inbox:
        return inbox

    now = now_ms()
    inbox = TaskList(
        id=generate_id(),
        name=settings.INBOX_NAME,
        icon=settings.INBOX_ICON,
        color=settings.INBOX_COLOR,
        is_default=True,
        created_at=now,
        updated_at=now,
    )
    db.add(inbox)
    commit(db)
    db.refresh(inbox)
    logger.info("Inbox list created id=%s", inbox.id)
    return inbox


def get_inbox(db: Session) -> TaskList:
    inbox = db.query(TaskList).filter(TaskList.is_default == True).first()
    if not inbox:
        # base ré-initialisée sans bootstrap: on recrée l'Inbox
        return ensure_inbox(db)
    return inbox


def list_lists(db: Session) -> List[TaskList]:
    return db.query(TaskList).order_by(TaskList.is_default.desc(), TaskList.created_at.asc(), TaskList.name).all()


def get_list(db: Session, list_id: str) -> Optional[TaskList]:
    return db.query(TaskList).filter(TaskList.id == list_id).first()


def _clean_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise ValidationError("List name is required")
    return name.strip()


def _check_unique_name(db: Session, name: str, exclude_id: Optional[str] = None) -> None:
    query = db.query(TaskList).filter(TaskList.name == name)
    if exclude_id:
        query = query.filter(TaskList.id != exclude_id)
    if query.first():
        raise ValidationError(f"A list named '{name}' already exists")


def create_list(db: Session, name: str, icon: Optional[str] = None, color: Optional[str] = None) -> TaskList:
    name = _clean_name(name)
    _check_unique_name(db, name)

    now = now_ms()
    new_list = TaskList(
        id=generate_id(),
        name=name,
        icon=icon or "📝",
        color=color or "gray",
        is_default=False,
        created_at=now,
        updated_at=now,
    )
    db.add(new_list)
    commit(db)
    db.refresh(new_list)
    logger.info("List created id=%s name=%s", new_list.id, new_list.name)
    return new_list


def update_list(db: Session, list_id: str, name: Optional[str] = None, icon: Optional[str] = None,
                color: Optional[str] = None) -> TaskList:
    task_list = get_list(db, list_id)
    if not task_list:
        raise NotFound("List not found")

    if name is not None:
        name = _clean_name(name)
        _check_unique_name(db, name, exclude_id=list_id)
        task_list.name = name
    if icon is not None:
        task_list.icon = icon
    if color is not None:
        task_list.color = color

    task_list.updated_at = now_ms()
    commit(db)
    db.refresh(task_list)
    return task_list


def delete_list(db: Session, list_id: str) -> None:
    task_list = get_list(db, list_id)
    if not task_list:
        raise NotFound("List not found")
    if task_list.is_default:
        raise InvalidOperation("Cannot delete the default list")

    # les tâches partent en cascade (FK ON DELETE CASCADE)
    db.delete(task_list)
    commit(db)
    logger.info("List deleted id=%s", list_id)
