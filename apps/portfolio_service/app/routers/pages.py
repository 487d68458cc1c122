from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from markupsafe import Markup
from sqlalchemy import update
from sqlalchemy.orm import Session
from ..database import get_db
from ..models import Portfolio
from ..rendering import render_portfolio_page, render_section
from ..repository import SectionRepository
from ..theme import generate_theme_styles, get_layout_class
from .portfolio import build_public_payload, get_published_portfolio

router = APIRouter(tags=["pages"])

@router.get("/p/{slug}", response_class=HTMLResponse)
def portfolio_page(slug: str, db: Session = Depends(get_db)):
    """Public portfolio page; each visit bumps the view counter"""
    portfolio = get_published_portfolio(db, slug)

    # increment in SQL so concurrent visits are not lost
    db.execute(
        update(Portfolio)
        .where(Portfolio.id == portfolio.id)
        .values(view_count=Portfolio.view_count + 1)
    )
    db.commit()
    db.refresh(portfolio)

    context = build_public_payload(db, portfolio)
    theme = portfolio.theme
    theme_css = generate_theme_styles(theme if theme is not None else {})
    sections = SectionRepository(db).list_for_portfolio(portfolio.id, published_only=True)
    context.update({
        # stylesheet is emitted raw inside <style>; only a closing tag could escape it
        "theme_css": Markup(theme_css.replace("</", "<\\/")),
        "layout_class": get_layout_class(theme.layout if theme is not None else "grid"),
        "sections": [render_section(section) for section in sections],
    })
    return HTMLResponse(render_portfolio_page(context))
