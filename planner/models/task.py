"""Task model"""

from sqlalchemy import Column, Integer, String, BigInteger, Boolean, ForeignKey, Table
from sqlalchemy.orm import relationship, backref
from planner.core.database import Base
from planner.core.timeutil import generate_id, now_ms

PRIORITIES = ("high", "medium", "low", "none")
RECURRENCES = ("every_day", "every_week", "every_weekday", "every_month", "every_year", "custom")


task_labels = Table(
    "task_labels",
    Base.metadata,
    Column("task_id", String, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True),
    Column("label_id", String, ForeignKey("labels.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String, primary_key=True, default=generate_id)
    list_id = Column(String, ForeignKey("lists.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=True, index=True)

    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    date = Column(BigInteger, nullable=True, index=True)
    deadline = Column(BigInteger, nullable=True, index=True)
    estimate = Column(Integer, nullable=True)  # minutes
    actual_time = Column(Integer, nullable=True)  # minutes
    priority = Column(String, nullable=False, default="none")

    completed = Column(Boolean, nullable=False, default=False, index=True)
    completed_at = Column(BigInteger, nullable=True)

    recurrence = Column(String, nullable=True)
    recurrence_pattern = Column(String, nullable=True)

    position = Column(Integer, nullable=False, default=0)

    created_at = Column(BigInteger, nullable=False, default=now_ms)
    updated_at = Column(BigInteger, nullable=False, default=now_ms)

    task_list = relationship("TaskList", back_populates="tasks")
    labels = relationship(
        "Label",
        secondary=task_labels,
        back_populates="tasks",
        order_by="Label.name",
        passive_deletes=True,
    )
    # un seul niveau de sous-tâches
    subtasks = relationship(
        "Task",
        backref=backref("parent", remote_side=[id]),
        order_by=lambda: [Task.created_at, Task.position],
        cascade="all",
        passive_deletes=True,
    )
    reminders = relationship(
        "Reminder",
        back_populates="task",
        order_by="Reminder.reminder_time",
        cascade="all",
        passive_deletes=True,
    )
    attachments = relationship(
        "Attachment",
        back_populates="task",
        order_by="Attachment.created_at",
        cascade="all",
        passive_deletes=True,
    )
    activity_logs = relationship(
        "ActivityLog",
        back_populates="task",
        order_by="desc(ActivityLog.created_at)",
        cascade="all",
        passive_deletes=True,
    )

    @property
    def is_subtask(self) -> bool:
        return self.parent_task_id is not None
