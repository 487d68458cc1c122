from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging
from ..auth import get_current_user
from ..config import get_settings
from ..database import get_db
from ..limiter import limiter
from ..models import SocialLink, User
from ..schemas import ProfileOut, ProfileUpdate, UploadResponse
from ..utils import to_data_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["profile"])

# Social platforms surfaced as flat profile fields
PROFILE_SOCIAL_PLATFORMS = {"github": "GitHub", "twitter": "Twitter", "linkedin": "LinkedIn"}

def build_profile(user: User) -> dict:
    profile = {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "image": user.image,
        "bio": user.bio,
        "job_title": user.job_title,
        "location": user.location,
        "phone": user.phone,
        "website": user.website,
    }
    links = {link.platform: link.url for link in user.social_links}
    for field, platform in PROFILE_SOCIAL_PLATFORMS.items():
        profile[field] = links.get(platform)
    return profile

@router.get("/profile", response_model=ProfileOut)
@limiter.limit("10/minute")
def get_profile(request: Request, current_user: User = Depends(get_current_user)):
    return build_profile(current_user)

@router.put("/profile", response_model=ProfileOut)
@limiter.limit("5/minute")
def update_profile(
    request: Request,
    payload: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        current_user.name = payload.name
        current_user.bio = payload.bio
        current_user.job_title = payload.job_title
        current_user.location = payload.location
        current_user.phone = payload.phone
        current_user.website = str(payload.website) if payload.website else None

        existing = {link.platform: link for link in current_user.social_links}
        for field, platform in PROFILE_SOCIAL_PLATFORMS.items():
            url = getattr(payload, field)
            link = existing.get(platform)
            if url:
                if link:
                    link.url = url
                else:
                    db.add(SocialLink(user_id=current_user.id, platform=platform, url=url))
            elif link:
                db.delete(link)
        db.commit()
        db.refresh(current_user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating profile for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update profile")
    return build_profile(current_user)

@router.delete("/profile", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete the account and everything it owns"""
    user_id = current_user.id
    try:
        db.delete(current_user)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete account")
    logger.info(f"Deleted user {user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/upload", response_model=UploadResponse)
async def upload_avatar(
    file: UploadFile = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Store a profile image and return it as a data URL"""
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="File must be an image")

    max_bytes = get_settings().MAX_UPLOAD_BYTES
    content = await file.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise HTTPException(status_code=400, detail=f"File size must be less than {max_bytes // (1024 * 1024)}MB")
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    data_url = to_data_url(content, file.content_type)
    try:
        current_user.image = data_url
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error saving avatar for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to upload image")
    logger.info(f"Stored {len(content)} byte avatar for user {current_user.id}")
    return {"url": data_url}
