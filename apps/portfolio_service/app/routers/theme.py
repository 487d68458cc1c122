from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging
from ..auth import get_current_user
from ..database import get_db
from ..limiter import limiter
from ..models import Portfolio, PortfolioTheme, User
from ..schemas import ThemeIn, ThemeOut
from ..theme import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_FONT,
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_SECONDARY_COLOR,
    generate_theme_styles,
    sanitize_css,
)
from .portfolio import get_current_portfolio

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/portfolio/theme", tags=["theme"])

def default_theme() -> dict:
    return {
        "layout": "grid",
        "primary_color": DEFAULT_PRIMARY_COLOR,
        "secondary_color": DEFAULT_SECONDARY_COLOR,
        "background_color": DEFAULT_BACKGROUND_COLOR,
        "font_family": DEFAULT_FONT,
        "background_image": None,
        "custom_css": None,
    }

@router.get("", response_model=ThemeOut)
@limiter.limit("10/minute")
def get_theme(request: Request, portfolio: Portfolio = Depends(get_current_portfolio)):
    """The portfolio's theme, or the defaults if none has been saved"""
    theme = ThemeOut.model_validate(portfolio.theme) if portfolio.theme else ThemeOut(**default_theme())
    theme.portfolio_slug = portfolio.slug
    return theme

@router.post("", response_model=ThemeOut)
@limiter.limit("5/minute")
def save_theme(
    request: Request,
    payload: ThemeIn,
    portfolio: Portfolio = Depends(get_current_portfolio),
    db: Session = Depends(get_db)
):
    data = payload.model_dump()
    data["custom_css"] = sanitize_css(data["custom_css"])
    try:
        theme = portfolio.theme
        if theme is None:
            theme = PortfolioTheme(portfolio_id=portfolio.id, **data)
            db.add(theme)
        else:
            for field, value in data.items():
                setattr(theme, field, value)
        db.commit()
        db.refresh(theme)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error saving theme for portfolio {portfolio.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save theme")
    return theme

@router.post("/preview", response_class=PlainTextResponse)
def preview_theme(payload: ThemeIn, current_user: User = Depends(get_current_user)):
    """Stylesheet for an unsaved theme"""
    css = generate_theme_styles(payload.model_dump())
    return PlainTextResponse(css, media_type="text/css")
