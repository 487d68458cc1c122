from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging
from ..auth import get_current_user
from ..database import get_db
from ..models import Experience, User
from ..repository import OwnedRepository
from ..schemas import ExperienceIn, ExperienceOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/experience", tags=["experience"])

def get_experience_repository(db: Session = Depends(get_db)) -> OwnedRepository:
    return OwnedRepository(Experience, db, order_by=[Experience.start_date.desc()])

@router.get("", response_model=List[ExperienceOut])
def list_experience(
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_experience_repository)
):
    return repo.get_by_user_id(current_user.id)

@router.post("", response_model=ExperienceOut)
def create_experience(
    data: ExperienceIn,
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_experience_repository)
):
    try:
        return repo.create(current_user.id, data.model_dump())
    except SQLAlchemyError as e:
        repo.db.rollback()
        logger.error(f"Error creating experience for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create experience")

@router.put("/{id}", response_model=ExperienceOut)
def update_experience(
    id: UUID,
    data: ExperienceIn,
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_experience_repository)
):
    experience = repo.get(id, current_user.id)
    if not experience:
        raise HTTPException(status_code=404, detail="Experience not found")
    try:
        return repo.update(experience, data.model_dump())
    except SQLAlchemyError as e:
        repo.db.rollback()
        logger.error(f"Error updating experience {id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update experience")

@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_experience(
    id: UUID,
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_experience_repository)
):
    if not repo.delete(id, current_user.id):
        raise HTTPException(status_code=404, detail="Experience not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
