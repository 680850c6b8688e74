from sqlalchemy import Column, String, BigInteger, ForeignKey
from sqlalchemy.orm import relationship
from planner.core.database import Base
from planner.core.timeutil import generate_id, now_ms


class Reminder(Base):
    __tablename__ = "reminders"

    id = Column(String, primary_key=True, default=generate_id)
    task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    reminder_time = Column(BigInteger, nullable=False)
    created_at = Column(BigInteger, nullable=False, default=now_ms)

    task = relationship("Task", back_populates="reminders")
