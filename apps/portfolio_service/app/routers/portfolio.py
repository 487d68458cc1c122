from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID, uuid4
import logging
from ..auth import get_current_user
from ..database import get_db
from ..models import Education, Experience, Portfolio, Project, Skill, SocialLink, User
from ..schemas import PortfolioCreate, PortfolioOut, PortfolioUpdate, PublicPortfolio
from ..utils import slugify
from .profile import build_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["portfolio"])

def get_current_portfolio(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Portfolio:
    """The caller's portfolio; 404 if they have not created one"""
    portfolio = db.query(Portfolio).filter(Portfolio.user_id == current_user.id).first()
    if not portfolio:
        raise HTTPException(status_code=404, detail="Portfolio not found")
    return portfolio

def slug_taken(db: Session, slug: str, exclude_id: Optional[UUID] = None) -> bool:
    query = db.query(Portfolio.id).filter(Portfolio.slug == slug)
    if exclude_id is not None:
        query = query.filter(Portfolio.id != exclude_id)
    return query.first() is not None

def get_published_portfolio(db: Session, slug: str) -> Portfolio:
    portfolio = db.query(Portfolio).filter(Portfolio.slug == slug).first()
    # unpublished portfolios are indistinguishable from missing ones
    if not portfolio or not portfolio.is_published:
        raise HTTPException(status_code=404, detail="Portfolio not found")
    return portfolio

def build_public_payload(db: Session, portfolio: Portfolio) -> dict:
    user_id = portfolio.user_id
    return {
        "portfolio": portfolio,
        "user": build_profile(portfolio.user),
        "skills": db.query(Skill).filter(Skill.user_id == user_id).order_by(Skill.order.asc(), Skill.name.asc()).all(),
        "projects": db.query(Project).filter(Project.user_id == user_id).order_by(Project.order.asc(), Project.updated_at.desc()).all(),
        "experiences": db.query(Experience).filter(Experience.user_id == user_id).order_by(Experience.start_date.desc()).all(),
        "educations": db.query(Education).filter(Education.user_id == user_id).order_by(Education.start_date.desc()).all(),
        "social_links": db.query(SocialLink).filter(SocialLink.user_id == user_id).order_by(SocialLink.platform.asc()).all(),
    }

@router.get("/portfolio", response_model=PortfolioOut)
def get_portfolio(portfolio: Portfolio = Depends(get_current_portfolio)):
    return portfolio

@router.post("/portfolio", response_model=PortfolioOut, status_code=status.HTTP_201_CREATED)
def create_portfolio(
    payload: PortfolioCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if db.query(Portfolio).filter(Portfolio.user_id == current_user.id).first():
        raise HTTPException(status_code=400, detail="Portfolio already exists")

    data = payload.model_dump()
    if payload.slug:
        if slug_taken(db, payload.slug):
            raise HTTPException(status_code=400, detail="This URL is already taken")
    else:
        slug = slugify(payload.title) or "portfolio"
        if slug_taken(db, slug):
            slug = f"{slug[:91]}-{uuid4().hex[:8]}"
        data["slug"] = slug

    portfolio = Portfolio(user_id=current_user.id, **data)
    db.add(portfolio)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="This URL is already taken")
    db.refresh(portfolio)
    logger.info(f"Created portfolio {portfolio.slug} for user {current_user.id}")
    return portfolio

@router.put("/portfolio/{id}", response_model=PortfolioOut)
def update_portfolio(
    id: UUID,
    payload: PortfolioUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    portfolio = db.query(Portfolio).filter(Portfolio.id == id, Portfolio.user_id == current_user.id).first()
    if not portfolio:
        raise HTTPException(status_code=404, detail="Portfolio not found")

    update_data = payload.model_dump(exclude_unset=True)
    if update_data.get("slug") is None:
        update_data.pop("slug", None)
    elif slug_taken(db, update_data["slug"], exclude_id=portfolio.id):
        raise HTTPException(status_code=400, detail="This URL is already taken")
    if "title" in update_data and update_data["title"] is None:
        update_data.pop("title")
    if "is_published" in update_data and update_data["is_published"] is None:
        update_data.pop("is_published")

    for field, value in update_data.items():
        setattr(portfolio, field, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="This URL is already taken")
    db.refresh(portfolio)
    return portfolio

@router.delete("/portfolio/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_portfolio(
    id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    portfolio = db.query(Portfolio).filter(Portfolio.id == id, Portfolio.user_id == current_user.id).first()
    if not portfolio:
        raise HTTPException(status_code=404, detail="Portfolio not found")
    db.delete(portfolio)
    db.commit()
    logger.info(f"Deleted portfolio {id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/p/{slug}", response_model=PublicPortfolio)
def get_public_portfolio(slug: str, db: Session = Depends(get_db)):
    """Everything needed to display a published portfolio"""
    portfolio = get_published_portfolio(db, slug)
    return build_public_payload(db, portfolio)
