from sqlalchemy.orm import Session
from typing import List, Optional

from planner.core.database import commit
from planner.core.errors import NotFound, ValidationError
from planner.core.timeutil import generate_id, now_ms
from planner.models.label import Label


def list_labels(db: Session) -> List[Label]:
    return db.query(Label).order_by(Label.name.asc(), Label.created_at.asc()).all()


def get_label(db: Session, label_id: str) -> Optional[Label]:
    return db.query(Label).filter(Label.id == label_id).first()


def find_label(db: Session, id_or_name: str) -> Optional[Label]:
    # d'abord par id, sinon par nom (le plus ancien gagne)
    label = get_label(db, id_or_name)
    if label:
        return label
    return db.query(Label).filter(Label.name == id_or_name).order_by(Label.created_at.asc()).first()


def create_label(db: Session, name: str, icon: Optional[str] = None, color: Optional[str] = None) -> Label:
    if name is None or not name.strip():
        raise ValidationError("Label name is required")

    now = now_ms()
    label = Label(
        id=generate_id(),
        name=name.strip(),
        icon=icon or "🏷️",
        color=color or "gray",
        created_at=now,
        updated_at=now,
    )
    db.add(label)
    commit(db)
    db.refresh(label)
    return label


def update_label(db: Session, label_id: str, name: Optional[str] = None, icon: Optional[str] = None,
                 color: Optional[str] = None) -> Label:
    label = get_label(db, label_id)
    if not label:
        raise NotFound("Label not found")

    if name is not None:
        if not name.strip():
            raise ValidationError("Label name is required")
        label.name = name.strip()
    if icon is not None:
        label.icon = icon
    if color is not None:
        label.color = color

    label.updated_at = now_ms()
    commit(db)
    db.refresh(label)
    return label


def delete_label(db: Session, label_id: str) -> None:
    label = get_label(db, label_id)
    if not label:
        raise NotFound("Label not found")

    # seuls les liens task_labels disparaissent, les tâches restent
    db.delete(label)
    commit(db)
