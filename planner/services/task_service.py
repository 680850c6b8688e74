"""
Task service: seul chemin de mutation des tâches, sous-tâches, labels et rappels.

Les écritures passent par commit(): une base injoignable lève StorageUnavailable.
Les lectures laissent remonter OperationalError, convertie en 503 par le handler HTTP.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from planner.core.database import commit
from planner.core.errors import InvalidOperation, NotFound, ValidationError
from planner.core.timeutil import (
    DateInput,
    DurationInput,
    generate_id,
    now_ms,
    parse_minutes,
    parse_timestamp,
)
from planner.models.attachment import Attachment
from planner.models.label import Label
from planner.models.reminder import Reminder
from planner.models.task import PRIORITIES, RECURRENCES, Task
from planner.services.activity_service import diff_fields, log_change
from planner.services.label_service import find_label, get_label
from planner.services.list_service import get_inbox, get_list

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "name",
    "list_id",
    "description",
    "date",
    "deadline",
    "estimate",
    "actual_time",
    "priority",
    "completed",
    "recurrence",
    "recurrence_pattern",
    "position",
)


# ============ VALIDATION ============

def _clean_name(name: Optional[str], what: str = "Task") -> str:
    if name is None or not str(name).strip():
        raise ValidationError(f"{what} name is required")
    return str(name).strip()


def _check_priority(priority: Optional[str]) -> str:
    if priority not in PRIORITIES:
        raise ValidationError(f"Invalid priority: {priority!r} (expected one of {', '.join(PRIORITIES)})")
    return priority


def _check_recurrence(recurrence: Optional[str]) -> Optional[str]:
    if recurrence is None or recurrence == "":
        return None
    if recurrence not in RECURRENCES:
        raise ValidationError(f"Invalid recurrence: {recurrence!r}")
    return recurrence


def _resolve_list_id(db: Session, list_id: Optional[str], no_list: bool = False) -> str:
    if no_list or not list_id:
        return get_inbox(db).id
    if not get_list(db, list_id):
        raise NotFound("List not found")
    return list_id


def _resolve_labels(db: Session, labels: Optional[Iterable[str]]) -> List[Label]:
    resolved = []
    seen = set()
    for id_or_name in labels or []:
        label = find_label(db, id_or_name)
        if not label:
            raise NotFound(f"Label not found: {id_or_name}")
        if label.id not in seen:
            seen.add(label.id)
            resolved.append(label)
    return resolved


def _next_position(db: Session, list_id: str, parent_task_id: Optional[str] = None) -> int:
    # position = max(positions des frères) + 1, frères = même liste et même parent
    query = db.query(func.max(Task.position)).filter(Task.list_id == list_id)
    if parent_task_id is None:
        query = query.filter(Task.parent_task_id.is_(None))
    else:
        query = query.filter(Task.parent_task_id == parent_task_id)
    max_position = query.scalar()
    return 0 if max_position is None else max_position + 1


# ============ LECTURE ============

def get_task(db: Session, task_id: str) -> Optional[Task]:
    return (
        db.query(Task)
        .options(selectinload(Task.labels), selectinload(Task.subtasks))
        .filter(Task.id == task_id)
        .first()
    )


def get_task_detail(db: Session, task_id: str) -> Optional[Task]:
    return (
        db.query(Task)
        .options(
            selectinload(Task.labels),
            selectinload(Task.subtasks),
            selectinload(Task.reminders),
            selectinload(Task.attachments),
            selectinload(Task.activity_logs),
            selectinload(Task.task_list),
        )
        .filter(Task.id == task_id)
        .first()
    )


def _get_task_or_raise(db: Session, task_id: str) -> Task:
    task = get_task(db, task_id)
    if not task:
        raise NotFound("Task not found")
    return task


# ============ TACHES ============

def create_task(
    db: Session,
    name: str,
    list_id: Optional[str] = None,
    no_list: bool = False,
    description: Optional[str] = None,
    date: DateInput = None,
    deadline: DateInput = None,
    estimate: DurationInput = None,
    actual_time: DurationInput = None,
    priority: Optional[str] = "none",
    recurrence: Optional[str] = None,
    recurrence_pattern: Optional[str] = None,
    labels: Optional[List[str]] = None,
) -> Task:
    # tout est validé avant la moindre écriture
    name = _clean_name(name)
    resolved_list_id = _resolve_list_id(db, list_id, no_list)
    priority = _check_priority(priority or "none")
    recurrence = _check_recurrence(recurrence)
    date_ms = parse_timestamp(date, "date")
    deadline_ms = parse_timestamp(deadline, "deadline")
    estimate_min = parse_minutes(estimate, "estimate")
    actual_min = parse_minutes(actual_time, "actual_time")
    task_labels = _resolve_labels(db, labels)

    now = now_ms()
    task = Task(
        id=generate_id(),
        list_id=resolved_list_id,
        name=name,
        description=description,
        date=date_ms,
        deadline=deadline_ms,
        estimate=estimate_min,
        actual_time=actual_min,
        priority=priority,
        completed=False,
        completed_at=None,
        recurrence=recurrence,
        recurrence_pattern=recurrence_pattern if recurrence else None,
        position=_next_position(db, resolved_list_id),
        created_at=now,
        updated_at=now,
    )
    # tâche + liens labels = une seule transaction
    task.labels.extend(task_labels)
    db.add(task)
    commit(db)
    db.refresh(task)

    logger.info("Task created id=%s list=%s", task.id, task.list_id)
    log_change(db, task.id, "created", {
        "name": task.name,
        "list_id": task.list_id,
        "priority": task.priority,
        "labels": [label.id for label in task_labels],
    })
    return task


def _normalize_changes(db: Session, task: Task, changes: Dict[str, Any]) -> Dict[str, Any]:
    normalized = {}
    for field, value in changes.items():
        if field not in UPDATABLE_FIELDS:
            raise ValidationError(f"Unknown task field: {field}")

        if field == "name":
            value = _clean_name(value)
        elif field == "list_id":
            if task.parent_task_id is not None and value != task.list_id:
                raise InvalidOperation("A subtask always stays in its parent's list")
            value = _resolve_list_id(db, value)
        elif field in ("date", "deadline"):
            value = parse_timestamp(value, field)
        elif field in ("estimate", "actual_time"):
            value = parse_minutes(value, field)
        elif field == "priority":
            value = _check_priority(value)
        elif field == "recurrence":
            value = _check_recurrence(value)
        elif field in ("completed", "position"):
            if value is None:
                raise ValidationError(f"{field} cannot be null")
            value = bool(value) if field == "completed" else int(value)

        normalized[field] = value
    return normalized


def update_task(db: Session, task_id: str, changes: Dict[str, Any]) -> Task:
    task = _get_task_or_raise(db, task_id)
    normalized = _normalize_changes(db, task, changes)

    current = {field: getattr(task, field) for field in normalized}
    diff = diff_fields(current, normalized)
    if not diff:
        return task

    now = now_ms()
    if "list_id" in diff and "position" not in normalized:
        # la tâche passe en fin de la liste cible
        new_position = _next_position(db, diff["list_id"]["new"])
        if new_position != task.position:
            diff["position"] = {"old": task.position, "new": new_position}

    for field, change in diff.items():
        setattr(task, field, change["new"])

    if "completed" in diff:
        task.completed_at = now if task.completed else None

    if "list_id" in diff:
        for subtask in task.subtasks:
            subtask.list_id = task.list_id
            subtask.updated_at = now

    task.updated_at = now
    commit(db)
    db.refresh(task)

    log_change(db, task.id, "updated", diff)
    return task


def delete_task(db: Session, task_id: str) -> None:
    task = _get_task_or_raise(db, task_id)

    # état avant suppression; l'entrée part ensuite avec la cascade
    log_change(db, task.id, "deleted", {"name": task.name, "list_id": task.list_id})

    db.delete(task)
    commit(db)
    logger.info("Task deleted id=%s", task_id)


# ============ SOUS-TACHES ============

def create_subtask(db: Session, parent_task_id: str, name: str) -> Task:
    name = _clean_name(name, "Subtask")
    parent = _get_task_or_raise(db, parent_task_id)
    if parent.parent_task_id is not None:
        raise InvalidOperation("Subtasks cannot have subtasks")

    now = now_ms()
    subtask = Task(
        id=generate_id(),
        list_id=parent.list_id,
        parent_task_id=parent.id,
        name=name,
        priority="none",
        completed=False,
        completed_at=None,
        position=_next_position(db, parent.list_id, parent.id),
        created_at=now,
        updated_at=now,
    )
    db.add(subtask)
    commit(db)
    db.refresh(subtask)

    log_change(db, parent.id, "subtask_added", {"subtask_id": subtask.id, "name": subtask.name})
    return subtask


def _get_subtask_or_raise(db: Session, subtask_id: str) -> Task:
    subtask = db.query(Task).filter(Task.id == subtask_id, Task.parent_task_id.isnot(None)).first()
    if not subtask:
        raise NotFound("Subtask not found")
    return subtask


def update_subtask_completion(db: Session, subtask_id: str, completed: bool) -> Task:
    subtask = _get_subtask_or_raise(db, subtask_id)
    completed = bool(completed)
    if subtask.completed == completed:
        return subtask

    now = now_ms()
    subtask.completed = completed
    subtask.completed_at = now if completed else None
    subtask.updated_at = now
    commit(db)
    db.refresh(subtask)

    log_change(db, subtask.parent_task_id, "subtask_updated", {"subtask_id": subtask.id, "completed": completed})
    return subtask


def delete_subtask(db: Session, subtask_id: str) -> None:
    subtask = _get_subtask_or_raise(db, subtask_id)
    parent_id = subtask.parent_task_id
    payload = {"subtask_id": subtask.id, "name": subtask.name}

    db.delete(subtask)
    commit(db)
    log_change(db, parent_id, "subtask_removed", payload)


# ============ LABELS ============

def add_label_to_task(db: Session, task_id: str, label_id: str) -> Task:
    task = _get_task_or_raise(db, task_id)
    label = get_label(db, label_id)
    if not label:
        raise NotFound("Label not found")

    if any(existing.id == label.id for existing in task.labels):
        return task

    task.labels.append(label)
    try:
        db.commit()
    except IntegrityError:
        # insertion concurrente du même lien: rien à faire
        db.rollback()
        return _get_task_or_raise(db, task_id)

    log_change(db, task_id, "label_added", {"label_id": label.id, "label_name": label.name})
    return _get_task_or_raise(db, task_id)


def remove_label_from_task(db: Session, task_id: str, label_id: str) -> Task:
    task = _get_task_or_raise(db, task_id)

    label = next((existing for existing in task.labels if existing.id == label_id), None)
    if label is None:
        return task

    task.labels.remove(label)
    commit(db)

    log_change(db, task_id, "label_removed", {"label_id": label_id, "label_name": label.name})
    return _get_task_or_raise(db, task_id)


# ============ RAPPELS / PIECES JOINTES ============

def list_reminders(db: Session, task_id: str) -> List[Reminder]:
    _get_task_or_raise(db, task_id)
    return db.query(Reminder).filter(Reminder.task_id == task_id).order_by(Reminder.reminder_time).all()


def add_reminder(db: Session, task_id: str, reminder_time: DateInput) -> Reminder:
    reminder_ms = parse_timestamp(reminder_time, "reminder_time")
    if reminder_ms is None:
        raise ValidationError("reminder_time is required")
    _get_task_or_raise(db, task_id)

    reminder = Reminder(id=generate_id(), task_id=task_id, reminder_time=reminder_ms, created_at=now_ms())
    db.add(reminder)
    commit(db)
    db.refresh(reminder)

    log_change(db, task_id, "reminder_added", {"reminder_id": reminder.id, "reminder_time": reminder_ms})
    return reminder


def remove_reminder(db: Session, reminder_id: str) -> None:
    reminder = db.query(Reminder).filter(Reminder.id == reminder_id).first()
    if not reminder:
        raise NotFound("Reminder not found")

    task_id = reminder.task_id
    db.delete(reminder)
    commit(db)
    log_change(db, task_id, "reminder_removed", {"reminder_id": reminder_id})


def list_attachments(db: Session, task_id: str) -> List[Attachment]:
    _get_task_or_raise(db, task_id)
    return db.query(Attachment).filter(Attachment.task_id == task_id).order_by(Attachment.created_at).all()


def add_attachment(db: Session, task_id: str, file_name: str, file_url: str, file_size: int,
                   mime_type: str) -> Attachment:
    if not file_name or not file_name.strip():
        raise ValidationError("file_name is required")
    if not file_url or not file_url.strip():
        raise ValidationError("file_url is required")
    if file_size is None or file_size < 0:
        raise ValidationError("file_size must be >= 0")
    _get_task_or_raise(db, task_id)

    attachment = Attachment(
        id=generate_id(),
        task_id=task_id,
        file_name=file_name.strip(),
        file_url=file_url.strip(),
        file_size=file_size,
        mime_type=mime_type or "application/octet-stream",
        created_at=now_ms(),
    )
    db.add(attachment)
    commit(db)
    db.refresh(attachment)

    log_change(db, task_id, "attachment_added", {"attachment_id": attachment.id, "file_name": attachment.file_name})
    return attachment
