"""
Vues sur les tâches: today / next_7_days / upcoming / overdue / all,
par liste ou par label.

classify_tasks() est une fonction pure (pas d'accès base): elle filtre et
trie une collection de tâches de premier niveau pour un instant "now" donné.
get_view_tasks() charge les candidats depuis la base puis l'applique.

Tri:
- today, next_7_days, upcoming, overdue, all: priorité (high > medium > low > none),
  puis date croissante (sans date en dernier), puis création la plus récente
- par liste / par label: date croissante (sans date en dernier), puis position
L'id sert de dernier critère pour que l'ordre reste stable d'un appel à l'autre.
"""

from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session, selectinload

from planner.core.errors import ValidationError
from planner.core.timeutil import day_bounds
from planner.models.task import Task, task_labels


class View(str, Enum):
    TODAY = "today"
    NEXT_7_DAYS = "next_7_days"
    UPCOMING = "upcoming"
    OVERDUE = "overdue"
    ALL = "all"


PRIORITY_RANK = {"high": 1, "medium": 2, "low": 3, "none": 4}


def parse_view(view) -> View:
    if isinstance(view, View):
        return view
    try:
        return View(view or View.ALL.value)
    except ValueError:
        raise ValidationError(f"Unknown view: {view!r}")


def priority_order_key(task: Task):
    return (
        PRIORITY_RANK.get(task.priority, 4),
        task.date is None,
        task.date or 0,
        -(task.created_at or 0),
        task.id,
    )


def position_order_key(task: Task):
    return (task.date is None, task.date or 0, task.position, task.id)


def _matches_view(task: Task, view: View, today_start: int, tomorrow_start: int, week_end: int) -> bool:
    if view == View.TODAY:
        return task.date is not None and today_start <= task.date < tomorrow_start
    if view == View.NEXT_7_DAYS:
        return task.date is not None and today_start <= task.date <= week_end
    if view == View.UPCOMING:
        return task.date is not None and task.date >= today_start
    if view == View.OVERDUE:
        if task.completed:
            return False
        late_date = task.date is not None and task.date < today_start
        late_deadline = task.deadline is not None and task.deadline < today_start
        return late_date or late_deadline
    return True


def classify_tasks(
    tasks: Iterable[Task],
    view=View.ALL,
    now: Optional[datetime] = None,
    show_completed: bool = False,
    list_id: Optional[str] = None,
    label_id: Optional[str] = None,
) -> List[Task]:
    if now is None:
        now = datetime.now()

    # les sous-tâches ne remontent jamais au premier niveau
    candidates = [t for t in tasks if t.parent_task_id is None]

    # liste > label > vue
    if list_id or label_id:
        if list_id:
            candidates = [t for t in candidates if t.list_id == list_id]
        else:
            candidates = [t for t in candidates if any(label.id == label_id for label in t.labels)]
        if not show_completed:
            candidates = [t for t in candidates if not t.completed]
        return sorted(candidates, key=position_order_key)

    view = parse_view(view)
    today_start, tomorrow_start = day_bounds(now, 1)
    _, week_end = day_bounds(now, 7)

    selected = [t for t in candidates if _matches_view(t, view, today_start, tomorrow_start, week_end)]
    if not show_completed:
        selected = [t for t in selected if not t.completed]

    return sorted(selected, key=priority_order_key)


def _load_candidates(db: Session, list_id: Optional[str] = None, label_id: Optional[str] = None) -> List[Task]:
    query = (
        db.query(Task)
        .options(selectinload(Task.labels), selectinload(Task.subtasks))
        .filter(Task.parent_task_id.is_(None))
    )
    if list_id:
        query = query.filter(Task.list_id == list_id)
    elif label_id:
        query = query.join(task_labels, task_labels.c.task_id == Task.id).filter(task_labels.c.label_id == label_id)
    return query.all()


def get_view_tasks(
    db: Session,
    view=View.ALL,
    list_id: Optional[str] = None,
    label_id: Optional[str] = None,
    show_completed: bool = False,
    now: Optional[datetime] = None,
) -> List[Task]:
    if not (list_id or label_id):
        view = parse_view(view)
    tasks = _load_candidates(db, list_id=list_id, label_id=label_id)
    return classify_tasks(tasks, view, now=now, show_completed=show_completed, list_id=list_id, label_id=label_id)


def get_today_tasks(db: Session, show_completed: bool = False, now: Optional[datetime] = None) -> List[Task]:
    return get_view_tasks(db, View.TODAY, show_completed=show_completed, now=now)


def get_next_7_days_tasks(db: Session, show_completed: bool = False, now: Optional[datetime] = None) -> List[Task]:
    return get_view_tasks(db, View.NEXT_7_DAYS, show_completed=show_completed, now=now)


def get_upcoming_tasks(db: Session, show_completed: bool = False, now: Optional[datetime] = None) -> List[Task]:
    return get_view_tasks(db, View.UPCOMING, show_completed=show_completed, now=now)


def get_overdue_tasks(db: Session, now: Optional[datetime] = None) -> List[Task]:
    return get_view_tasks(db, View.OVERDUE, now=now)


def count_overdue_tasks(db: Session, now: Optional[datetime] = None) -> int:
    return len(get_overdue_tasks(db, now=now))
