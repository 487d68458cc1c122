from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging
from ..auth import get_current_user, get_password_hash, verify_password
from ..database import get_db
from ..limiter import limiter
from ..models import User, UserSettings
from ..schemas import PasswordChange, SettingsOut, SettingsUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/settings", tags=["settings"])

@router.get("", response_model=SettingsOut)
@limiter.limit("10/minute")
def read_settings(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Account settings, created with defaults on first read"""
    settings = db.query(UserSettings).filter(UserSettings.user_id == current_user.id).first()
    if settings:
        return settings
    settings = UserSettings(user_id=current_user.id, email_notifications=True, marketing_emails=False, theme="system")
    try:
        db.add(settings)
        db.commit()
        db.refresh(settings)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating settings for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load settings")
    return settings

@router.put("", response_model=SettingsOut)
@limiter.limit("5/minute")
def update_settings(
    request: Request,
    payload: SettingsUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    settings = db.query(UserSettings).filter(UserSettings.user_id == current_user.id).first()
    if not settings:
        settings = UserSettings(user_id=current_user.id)
        db.add(settings)
    settings.email_notifications = payload.email_notifications
    settings.marketing_emails = payload.marketing_emails
    if payload.theme is not None:
        settings.theme = payload.theme
    try:
        db.commit()
        db.refresh(settings)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating settings for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update settings")
    return settings

@router.patch("", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("3/minute")
def change_password(
    request: Request,
    payload: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Replace the password after checking the current one"""
    if not current_user.password_hash or not verify_password(payload.current_password, current_user.password_hash):
        raise HTTPException(status_code=400, detail="Invalid current password")
    try:
        current_user.password_hash = get_password_hash(payload.new_password)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error changing password for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update password")
    logger.info(f"Password changed for user {current_user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
