from sqlalchemy import Column, String, BigInteger
from sqlalchemy.orm import relationship
from planner.core.database import Base
from planner.core.timeutil import generate_id, now_ms


class Label(Base):
    __tablename__ = "labels"

    id = Column(String, primary_key=True, default=generate_id)
    name = Column(String, nullable=False, index=True)
    icon = Column(String, nullable=False, default="🏷️")
    color = Column(String, nullable=False, default="gray")
    created_at = Column(BigInteger, nullable=False, default=now_ms)
    updated_at = Column(BigInteger, nullable=False, default=now_ms)

    tasks = relationship(
        "Task",
        secondary="task_labels",
        back_populates="labels",
        passive_deletes=True,
    )
