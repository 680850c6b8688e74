"""List model"""

from sqlalchemy import Column, String, BigInteger, Boolean
from sqlalchemy.orm import relationship
from planner.core.database import Base
from planner.core.timeutil import generate_id, now_ms


class TaskList(Base):
    __tablename__ = "lists"

    id = Column(String, primary_key=True, default=generate_id)
    name = Column(String, nullable=False, unique=True)
    icon = Column(String, nullable=False, default="📝")
    color = Column(String, nullable=False, default="gray")
    is_default = Column(Boolean, nullable=False, default=False)

    created_at = Column(BigInteger, nullable=False, default=now_ms)
    updated_at = Column(BigInteger, nullable=False, default=now_ms)

    # la base supprime les tâches (ON DELETE CASCADE)
    tasks = relationship(
        "Task",
        back_populates="task_list",
        cascade="all",
        passive_deletes=True,
    )
