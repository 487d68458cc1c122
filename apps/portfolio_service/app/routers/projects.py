from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging
from ..auth import get_current_user
from ..database import get_db
from ..models import Project, User
from ..repository import OwnedRepository
from ..schemas import ProjectIn, ProjectOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])

def get_project_repository(db: Session = Depends(get_db)) -> OwnedRepository:
    return OwnedRepository(Project, db, order_by=[Project.order.asc(), Project.updated_at.desc()])

@router.get("", response_model=List[ProjectOut])
def list_projects(
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_project_repository)
):
    return repo.get_by_user_id(current_user.id)

@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def create_project(
    data: ProjectIn,
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_project_repository)
):
    try:
        # json mode turns the validated URLs back into plain strings
        project = repo.create(current_user.id, data.model_dump(mode="json"))
    except SQLAlchemyError as e:
        repo.db.rollback()
        logger.error(f"Error creating project for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create project")
    logger.info(f"Created project {project.id} for user {current_user.id}")
    return project

@router.put("/{id}", response_model=ProjectOut)
def update_project(
    id: UUID,
    data: ProjectIn,
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_project_repository)
):
    project = repo.get(id, current_user.id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    try:
        return repo.update(project, data.model_dump(mode="json"))
    except SQLAlchemyError as e:
        repo.db.rollback()
        logger.error(f"Error updating project {id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update project")

@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    id: UUID,
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_project_repository)
):
    if not repo.delete(id, current_user.id):
        raise HTTPException(status_code=404, detail="Project not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
