from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from planner.core.database import get_db
from planner.schemas.task_list import ListCreate, ListUpdate, ListResponse
from planner.services import list_service

router = APIRouter(prefix="/lists", tags=["lists"])


@router.post("", response_model=ListResponse, status_code=status.HTTP_201_CREATED)
def create_list(list_data: ListCreate, db: Session = Depends(get_db)):
    return list_service.create_list(db, name=list_data.name, icon=list_data.icon, color=list_data.color)


@router.get("", response_model=List[ListResponse])
def list_lists(db: Session = Depends(get_db)):
    # Inbox en premier, puis par date de création
    return list_service.list_lists(db)


@router.get("/{list_id}", response_model=ListResponse)
def get_list(list_id: str, db: Session = Depends(get_db)):
    task_list = list_service.get_list(db, list_id)
    if not task_list:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="List not found")
    return task_list


@router.put("/{list_id}", response_model=ListResponse)
def update_list(list_id: str, list_data: ListUpdate, db: Session = Depends(get_db)):
    return list_service.update_list(db, list_id, **list_data.model_dump(exclude_unset=True))


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_list(list_id: str, db: Session = Depends(get_db)):
    # 409 si on tente de supprimer l'Inbox
    list_service.delete_list(db, list_id)
