from sqlalchemy import Column, String, BigInteger, ForeignKey, JSON
from sqlalchemy.orm import relationship
from planner.core.database import Base
from planner.core.timeutil import generate_id, now_ms


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(String, primary_key=True, default=generate_id)
    task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    action = Column(String, nullable=False)  # "created", "updated", "label_added", ...
    changes = Column(JSON, nullable=False, default=dict)  # {champ: {"old": .., "new": ..}} pour "updated"
    created_at = Column(BigInteger, nullable=False, default=now_ms, index=True)

    task = relationship("Task", back_populates="activity_logs")
