from datetime import datetime, timedelta, timezone

import pytest

from planner.core.errors import ValidationError
from planner.core.timeutil import to_epoch_ms
from planner.models.label import Label
from planner.models.task import Task
from planner.services import label_service, list_service, task_service
from planner.services.view_service import View, classify_tasks, count_overdue_tasks, get_view_tasks

NOW = datetime(2026, 5, 15, 14, 30)
TODAY = datetime(2026, 5, 15)


def ms(dt):
    return to_epoch_ms(dt)


def make_task(task_id, date=None, priority="none", completed=False, created_at=0, position=0,
              list_id="work", deadline=None, parent_task_id=None, labels=None):
    task = Task(
        id=task_id,
        list_id=list_id,
        parent_task_id=parent_task_id,
        name=task_id,
        date=ms(date) if date else None,
        deadline=ms(deadline) if deadline else None,
        priority=priority,
        completed=completed,
        created_at=created_at,
        position=position,
    )
    task.labels = labels or []
    return task


def ids(tasks):
    return [t.id for t in tasks]


# ============ FENETRES ============

def test_day_boundaries():
    """Aujourd'hui / demain / J+8 / hier"""
    tasks = [
        make_task("today", date=TODAY + timedelta(hours=9)),
        make_task("tomorrow", date=TODAY + timedelta(days=1)),
        make_task("in_6_days", date=TODAY + timedelta(days=6)),
        make_task("in_8_days", date=TODAY + timedelta(days=8)),
        make_task("yesterday", date=TODAY - timedelta(days=1)),
    ]

    assert ids(classify_tasks(tasks, View.TODAY, now=NOW)) == ["today"]
    assert sorted(ids(classify_tasks(tasks, View.NEXT_7_DAYS, now=NOW))) == ["in_6_days", "today", "tomorrow"]
    assert sorted(ids(classify_tasks(tasks, View.UPCOMING, now=NOW))) == ["in_6_days", "in_8_days", "today", "tomorrow"]
    assert ids(classify_tasks(tasks, View.OVERDUE, now=NOW)) == ["yesterday"]


def test_today_includes_start_of_day_and_excludes_tomorrow():
    tasks = [
        make_task("midnight", date=TODAY),
        make_task("last_ms", date=TODAY + timedelta(days=1) - timedelta(milliseconds=1)),
        make_task("next_midnight", date=TODAY + timedelta(days=1)),
    ]
    assert sorted(ids(classify_tasks(tasks, View.TODAY, now=NOW))) == ["last_ms", "midnight"]


def test_next_7_days_upper_bound_is_inclusive():
    tasks = [
        make_task("edge", date=TODAY + timedelta(days=7)),
        make_task("after_edge", date=TODAY + timedelta(days=7, milliseconds=1)),
    ]
    assert ids(classify_tasks(tasks, View.NEXT_7_DAYS, now=NOW)) == ["edge"]


def test_undated_tasks_only_in_all():
    tasks = [make_task("undated"), make_task("dated", date=TODAY)]
    for view in (View.TODAY, View.NEXT_7_DAYS, View.UPCOMING, View.OVERDUE):
        assert "undated" not in ids(classify_tasks(tasks, view, now=NOW))
    assert sorted(ids(classify_tasks(tasks, View.ALL, now=NOW))) == ["dated", "undated"]


def test_overdue_by_deadline():
    tasks = [
        make_task("late_deadline", deadline=TODAY - timedelta(days=2)),
        make_task("future_deadline", deadline=TODAY + timedelta(days=2)),
    ]
    assert ids(classify_tasks(tasks, View.OVERDUE, now=NOW)) == ["late_deadline"]


def test_overdue_never_returns_completed():
    tasks = [make_task("done", date=TODAY - timedelta(days=3), completed=True)]
    assert classify_tasks(tasks, View.OVERDUE, now=NOW, show_completed=True) == []


def test_overdue_ignores_show_completed():
    tasks = [
        make_task("late", date=TODAY - timedelta(days=1)),
        make_task("late_done", date=TODAY - timedelta(days=1), completed=True),
    ]
    assert ids(classify_tasks(tasks, View.OVERDUE, now=NOW, show_completed=True)) == ["late"]
    assert ids(classify_tasks(tasks, View.OVERDUE, now=NOW, show_completed=False)) == ["late"]


def test_today_with_aware_now():
    """now avec un autre fuseau que le fuseau local"""
    now = datetime(2026, 5, 15, 23, 30, tzinfo=timezone(timedelta(hours=-10)))
    task = make_task("at_now")
    task.date = int(now.timestamp() * 1000)

    assert ids(classify_tasks([task], View.TODAY, now=now)) == ["at_now"]
    assert ids(classify_tasks([task], View.NEXT_7_DAYS, now=now)) == ["at_now"]
    assert classify_tasks([task], View.OVERDUE, now=now) == []


def test_completed_hidden_unless_requested():
    tasks = [
        make_task("open", date=TODAY),
        make_task("done", date=TODAY, completed=True),
    ]
    assert ids(classify_tasks(tasks, View.TODAY, now=NOW)) == ["open"]
    assert sorted(ids(classify_tasks(tasks, View.TODAY, now=NOW, show_completed=True))) == ["done", "open"]


def test_subtasks_never_at_top_level():
    tasks = [
        make_task("parent", date=TODAY),
        make_task("child", date=TODAY, parent_task_id="parent"),
    ]
    assert ids(classify_tasks(tasks, View.TODAY, now=NOW)) == ["parent"]
    assert ids(classify_tasks(tasks, list_id="work", now=NOW)) == ["parent"]


def test_empty_input():
    assert classify_tasks([], View.ALL, now=NOW) == []


def test_unknown_view():
    with pytest.raises(ValidationError):
        classify_tasks([make_task("a")], "someday", now=NOW)


# ============ TRI ============

def test_priority_ordering():
    tasks = [
        make_task("none", date=TODAY, priority="none"),
        make_task("low", date=TODAY, priority="low"),
        make_task("high", date=TODAY, priority="high"),
        make_task("medium", date=TODAY, priority="medium"),
    ]
    assert ids(classify_tasks(tasks, View.TODAY, now=NOW)) == ["high", "medium", "low", "none"]


def test_same_priority_sorted_by_date_then_newest():
    tasks = [
        make_task("undated_old", created_at=1),
        make_task("undated_new", created_at=2),
        make_task("later", date=TODAY + timedelta(days=2)),
        make_task("sooner", date=TODAY),
    ]
    assert ids(classify_tasks(tasks, View.ALL, now=NOW)) == ["sooner", "later", "undated_new", "undated_old"]


def test_ordering_is_stable_between_calls():
    tasks = [make_task(f"t{i}", date=TODAY, created_at=5) for i in range(5)]
    first = ids(classify_tasks(tasks, View.ALL, now=NOW))
    second = ids(classify_tasks(list(reversed(tasks)), View.ALL, now=NOW))
    assert first == second


def test_list_view_sorted_by_date_then_position():
    tasks = [
        make_task("p2", position=2),
        make_task("p0", position=0),
        make_task("dated", date=TODAY, position=5),
        make_task("other_list", list_id="home"),
    ]
    assert ids(classify_tasks(tasks, list_id="work", now=NOW)) == ["dated", "p0", "p2"]


def test_list_id_takes_precedence_over_label_and_view():
    urgent = Label(id="urgent", name="Urgent")
    tasks = [
        make_task("in_list", list_id="work"),
        make_task("labelled", list_id="home", labels=[urgent]),
    ]
    result = classify_tasks(tasks, View.TODAY, now=NOW, list_id="work", label_id="urgent")
    assert ids(result) == ["in_list"]


def test_label_filter():
    urgent = Label(id="urgent", name="Urgent")
    tasks = [
        make_task("labelled", labels=[urgent]),
        make_task("plain"),
    ]
    assert ids(classify_tasks(tasks, View.ALL, now=NOW, label_id="urgent")) == ["labelled"]


# ============ AVEC LA BASE ============

def test_get_view_tasks_by_label(db):
    home = label_service.create_label(db, "home")
    urgent = label_service.create_label(db, "urgent")
    tagged = task_service.create_task(db, name="Tagged", labels=[urgent.id, home.id])
    task_service.create_task(db, name="Plain")

    result = get_view_tasks(db, label_id=urgent.id)
    assert [t.id for t in result] == [tagged.id]
    # labels triés par nom
    assert [label.name for label in result[0].labels] == ["home", "urgent"]


def test_get_view_tasks_by_list(db):
    work = list_service.create_list(db, "Work")
    first = task_service.create_task(db, name="First", list_id=work.id)
    second = task_service.create_task(db, name="Second", list_id=work.id)
    task_service.create_task(db, name="Inbox task")

    assert [t.id for t in get_view_tasks(db, list_id=work.id)] == [first.id, second.id]


def test_get_view_tasks_unknown_view(db):
    with pytest.raises(ValidationError):
        get_view_tasks(db, "later")


def test_count_overdue(db):
    task_service.create_task(db, name="Late", date=TODAY - timedelta(days=1))
    task_service.create_task(db, name="Also late", deadline=TODAY - timedelta(days=5))
    done = task_service.create_task(db, name="Late but done", date=TODAY - timedelta(days=1))
    task_service.update_task(db, done.id, {"completed": True})
    task_service.create_task(db, name="On time", date=TODAY + timedelta(days=1))

    assert count_overdue_tasks(db, now=NOW) == 2


def test_get_view_tasks_overdue_with_show_completed(db):
    late = task_service.create_task(db, name="Late", date=TODAY - timedelta(days=1))
    done = task_service.create_task(db, name="Late but done", date=TODAY - timedelta(days=1))
    task_service.update_task(db, done.id, {"completed": True})

    result = get_view_tasks(db, "overdue", show_completed=True, now=NOW)
    assert [t.id for t in result] == [late.id]
