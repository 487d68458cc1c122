from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
from ..auth import get_current_user
from ..database import get_db
from ..models import Skill, User
from ..repository import OwnedRepository
from ..schemas import SkillIn, SkillOut

router = APIRouter(prefix="/api/skills", tags=["skills"])

def get_skill_repository(db: Session = Depends(get_db)) -> OwnedRepository:
    return OwnedRepository(Skill, db, order_by=[Skill.order.asc(), Skill.name.asc()])

@router.get("", response_model=List[SkillOut])
def list_skills(
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_skill_repository)
):
    return repo.get_by_user_id(current_user.id)

@router.post("", response_model=SkillOut, status_code=status.HTTP_201_CREATED)
def create_skill(
    data: SkillIn,
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_skill_repository)
):
    return repo.create(current_user.id, data.model_dump())

@router.put("/{id}", response_model=SkillOut)
def update_skill(
    id: UUID,
    data: SkillIn,
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_skill_repository)
):
    skill = repo.get(id, current_user.id)
    if not skill:
        raise HTTPException(status_code=404, detail="Skill not found")
    return repo.update(skill, data.model_dump())

@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_skill(
    id: UUID,
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_skill_repository)
):
    if not repo.delete(id, current_user.id):
        raise HTTPException(status_code=404, detail="Skill not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
