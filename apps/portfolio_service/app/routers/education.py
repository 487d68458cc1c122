from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging
from ..auth import get_current_user
from ..database import get_db
from ..models import Education, User
from ..repository import OwnedRepository
from ..schemas import EducationIn, EducationOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/education", tags=["education"])

def get_education_repository(db: Session = Depends(get_db)) -> OwnedRepository:
    return OwnedRepository(Education, db, order_by=[Education.start_date.desc()])

@router.get("", response_model=List[EducationOut])
def list_education(
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_education_repository)
):
    return repo.get_by_user_id(current_user.id)

@router.post("", response_model=EducationOut)
def create_education(
    data: EducationIn,
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_education_repository)
):
    try:
        return repo.create(current_user.id, data.model_dump())
    except SQLAlchemyError as e:
        repo.db.rollback()
        logger.error(f"Error creating education for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create education")

@router.put("/{id}", response_model=EducationOut)
def update_education(
    id: UUID,
    data: EducationIn,
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_education_repository)
):
    education = repo.get(id, current_user.id)
    if not education:
        raise HTTPException(status_code=404, detail="Education record not found")
    try:
        return repo.update(education, data.model_dump())
    except SQLAlchemyError as e:
        repo.db.rollback()
        logger.error(f"Error updating education {id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update education")

@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_education(
    id: UUID,
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_education_repository)
):
    if not repo.delete(id, current_user.id):
        raise HTTPException(status_code=404, detail="Education record not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
