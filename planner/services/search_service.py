import logging
from difflib import SequenceMatcher
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from planner.core.config import settings
from planner.core.errors import ValidationError
from planner.models.label import Label
from planner.models.task import Task
from planner.models.task_list import TaskList

logger = logging.getLogger(__name__)

SEARCH_MODES = ("fuzzy", "substring")

# poids par champ: un match sur le nom compte plus qu'un match sur le label
FIELD_WEIGHTS = {"name": 1.0, "description": 0.9, "list": 0.8, "label": 0.8}


def _base_query(db: Session):
    return (
        db.query(Task)
        .options(selectinload(Task.labels), selectinload(Task.subtasks), selectinload(Task.task_list))
        .filter(Task.parent_task_id.is_(None))
    )


def _fields(task: Task) -> List[Tuple[str, str]]:
    fields = [("name", task.name or ""), ("description", task.description or "")]
    if task.task_list is not None:
        fields.append(("list", task.task_list.name))
    fields.extend(("label", label.name) for label in task.labels)
    return fields


def _similarity(query: str, text: str) -> float:
    text = text.lower()
    if not text:
        return 0.0
    if query in text:
        return 1.0

    best = SequenceMatcher(None, query, text).ratio()
    # compare aussi avec des fenêtres de mots de la même taille que la requête
    words = text.split()
    size = max(1, len(query.split()))
    for i in range(len(words) - size + 1):
        window = " ".join(words[i:i + size])
        best = max(best, SequenceMatcher(None, query, window).ratio())
    return best


def score_task(task: Task, query: str) -> float:
    query = query.lower().strip()
    return max(FIELD_WEIGHTS[kind] * _similarity(query, text) for kind, text in _fields(task))


def _substring_rank(task: Task, query: str) -> int:
    # 0 = nom, 1 = description, 2 = liste ou label
    query = query.lower()
    if query in (task.name or "").lower():
        return 0
    if query in (task.description or "").lower():
        return 1
    return 2


def _substring_search(db: Session, query: str, limit: int) -> List[Task]:
    # % et _ sont des jokers LIKE: on les échappe
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    tasks = (
        _base_query(db)
        .outerjoin(TaskList, TaskList.id == Task.list_id)
        .outerjoin(Task.labels)
        .filter(or_(
            Task.name.ilike(pattern, escape="\\"),
            Task.description.ilike(pattern, escape="\\"),
            TaskList.name.ilike(pattern, escape="\\"),
            Label.name.ilike(pattern, escape="\\"),
        ))
        .distinct()
        .all()
    )
    tasks.sort(key=lambda t: (_substring_rank(t, query), -t.created_at, t.id))
    return tasks[:limit]


def _fuzzy_search(db: Session, query: str, limit: int) -> List[Task]:
    scored = []
    for task in _base_query(db).all():
        score = score_task(task, query)
        if score >= settings.FUZZY_THRESHOLD:
            scored.append((score, task))

    scored.sort(key=lambda pair: (-pair[0], -pair[1].created_at, pair[1].id))
    return [task for _, task in scored[:limit]]


def search_tasks(db: Session, query: str, mode: Optional[str] = None, limit: Optional[int] = None) -> List[Task]:
    # requête vide: on ne touche pas à la base
    if query is None or not query.strip():
        return []

    mode = mode or settings.SEARCH_MODE
    if mode not in SEARCH_MODES:
        raise ValidationError(f"Unknown search mode: {mode!r}")
    limit = limit or settings.SEARCH_LIMIT

    query = query.strip()
    if mode == "substring":
        results = _substring_search(db, query, limit)
    else:
        results = _fuzzy_search(db, query, limit)

    logger.debug("Search mode=%s query=%r results=%d", mode, query, len(results))
    return results
