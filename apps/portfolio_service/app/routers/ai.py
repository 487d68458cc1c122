from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging
from .. import ai
from ..auth import get_current_user
from ..database import get_db
from ..models import Education, Experience, Portfolio, Project, Skill, User
from ..schemas import (
    AnalyzePortfolioRequest,
    AnalyzePortfolioResponse,
    BioRequest,
    BioResponse,
    EnhanceRequest,
    EnhanceResponse,
    SkillRecommendationRequest,
    SkillRecommendationResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])

def reserve_or_reject(db: Session, user: User, request_type: str, prompt_length: int):
    """Claim a slot of the hourly allowance or answer 429"""
    record = ai.reserve_request(db, user.id, request_type, prompt_length)
    if record is None:
        logger.info(f"AI hourly limit reached for user {user.id}")
        raise HTTPException(
            status_code=429,
            detail={"error": "Rate limit exceeded. Please try again later.", "retryAfter": "1 hour"},
            headers={"Retry-After": "3600"},
        )
    return record

@router.post("/enhance", response_model=EnhanceResponse)
def enhance(
    payload: EnhanceRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    record = reserve_or_reject(db, current_user, f"enhance-{payload.type}", len(payload.content))
    try:
        enhanced = ai.enhance_content(payload.content, payload.type, payload.tone)
    except ai.AIServiceError as e:
        ai.release_request(db, record)
        logger.error(f"Content enhancement failed for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to enhance content")
    ai.complete_request(db, record, len(enhanced))
    return {"enhanced_content": enhanced}

@router.post("/generate-bio", response_model=BioResponse)
def generate_bio(
    payload: BioRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    prompt_length = sum(len(s) for s in payload.skills) + len(payload.experience) + len(payload.education)
    record = reserve_or_reject(db, current_user, "generate-bio", prompt_length)
    try:
        bio = ai.generate_bio(payload.skills, payload.experience, payload.education, payload.tone)
    except ai.AIServiceError as e:
        ai.release_request(db, record)
        logger.error(f"Bio generation failed for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate bio")
    ai.complete_request(db, record, len(bio))
    return {"bio_content": bio}

@router.post("/recommend-skills", response_model=SkillRecommendationResponse)
def recommend_skills(
    payload: SkillRecommendationRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    prompt_length = len(payload.job_title) + len(payload.experience or "")
    record = reserve_or_reject(db, current_user, "recommend-skills", prompt_length)
    try:
        skills = ai.recommend_skills(payload.job_title, payload.current_skills, payload.experience)
    except ai.AIServiceError as e:
        ai.release_request(db, record)
        logger.error(f"Skill recommendation failed for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to recommend skills")
    ai.complete_request(db, record, sum(len(s) for s in skills))
    return {"skills": skills}

@router.post("/analyze-portfolio", response_model=AnalyzePortfolioResponse)
def analyze_portfolio(
    payload: AnalyzePortfolioRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Improvement suggestions for one of the caller's portfolios"""
    portfolio = db.query(Portfolio).filter(
        Portfolio.id == payload.portfolio_id,
        Portfolio.user_id == current_user.id
    ).first()
    if not portfolio:
        raise HTTPException(status_code=404, detail="Portfolio not found")

    user_id = current_user.id
    portfolio_data = {
        "title": portfolio.title,
        "description": portfolio.description,
        "skills": [name for (name,) in db.query(Skill.name).filter(Skill.user_id == user_id).order_by(Skill.order.asc()).all()],
        "projects": db.query(Project).filter(Project.user_id == user_id).count(),
        "experiences": db.query(Experience).filter(Experience.user_id == user_id).count(),
        "educations": db.query(Education).filter(Education.user_id == user_id).count(),
    }
    prompt_length = len(portfolio.title) + len(portfolio.description or "")
    record = reserve_or_reject(db, current_user, "analyze-portfolio", prompt_length)
    try:
        suggestions = ai.analyze_portfolio(portfolio_data)
    except ai.AIServiceError as e:
        ai.release_request(db, record)
        logger.error(f"Portfolio analysis failed for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to analyze portfolio")
    ai.complete_request(db, record, sum(len(s) for s in suggestions))
    return {"suggestions": suggestions}
