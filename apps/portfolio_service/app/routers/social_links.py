from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
from ..auth import get_current_user
from ..database import get_db
from ..models import SocialLink, User
from ..repository import OwnedRepository
from ..schemas import SocialLinkIn, SocialLinkOut

router = APIRouter(prefix="/api/social-links", tags=["social-links"])

def get_social_link_repository(db: Session = Depends(get_db)) -> OwnedRepository:
    return OwnedRepository(SocialLink, db, order_by=[SocialLink.platform.asc()])

@router.get("", response_model=List[SocialLinkOut])
def list_social_links(
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_social_link_repository)
):
    return repo.get_by_user_id(current_user.id)

@router.post("", response_model=SocialLinkOut, status_code=status.HTTP_201_CREATED)
def create_social_link(
    data: SocialLinkIn,
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_social_link_repository)
):
    return repo.create(current_user.id, data.model_dump(mode="json"))

@router.put("/{id}", response_model=SocialLinkOut)
def update_social_link(
    id: UUID,
    data: SocialLinkIn,
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_social_link_repository)
):
    link = repo.get(id, current_user.id)
    if not link:
        raise HTTPException(status_code=404, detail="Social link not found")
    return repo.update(link, data.model_dump(mode="json"))

@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_social_link(
    id: UUID,
    current_user: User = Depends(get_current_user),
    repo: OwnedRepository = Depends(get_social_link_repository)
):
    if not repo.delete(id, current_user.id):
        raise HTTPException(status_code=404, detail="Social link not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
