from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from planner.core.database import get_db
from planner.schemas.label import LabelCreate, LabelUpdate, LabelResponse
from planner.services import label_service

router = APIRouter(prefix="/labels", tags=["labels"])


@router.post("", response_model=LabelResponse, status_code=status.HTTP_201_CREATED)
def create_label(label_data: LabelCreate, db: Session = Depends(get_db)):
    return label_service.create_label(db, name=label_data.name, icon=label_data.icon, color=label_data.color)


@router.get("", response_model=List[LabelResponse])
def list_labels(db: Session = Depends(get_db)):
    return label_service.list_labels(db)


@router.get("/{label_id}", response_model=LabelResponse)
def get_label(label_id: str, db: Session = Depends(get_db)):
    label = label_service.get_label(db, label_id)
    if not label:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Label not found")
    return label


@router.put("/{label_id}", response_model=LabelResponse)
def update_label(label_id: str, label_data: LabelUpdate, db: Session = Depends(get_db)):
    return label_service.update_label(db, label_id, **label_data.model_dump(exclude_unset=True))


@router.delete("/{label_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_label(label_id: str, db: Session = Depends(get_db)):
    label_service.delete_label(db, label_id)
