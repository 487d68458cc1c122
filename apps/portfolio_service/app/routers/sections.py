from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import json
import logging
from ..database import get_db
from ..limiter import limiter
from ..models import Portfolio
from ..repository import InvalidSectionIds, SectionRepository
from ..schemas import SectionOut, SectionReorder, SectionUpsert
from ..sections import SectionType, parse_section_content, serialize_section_content
from .portfolio import get_current_portfolio

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/portfolio/sections", tags=["sections"])

def get_section_repository(db: Session = Depends(get_db)) -> SectionRepository:
    return SectionRepository(db)

def validated_content(payload: SectionUpsert):
    """Serialized content for storage; 400 if it does not match the declared type"""
    if payload.content is None:
        return None
    raw = payload.content
    if payload.type == SectionType.CUSTOM and isinstance(raw, str):
        # custom markup arrives as a bare string rather than a JSON document
        raw = json.dumps(raw)
    validated = parse_section_content(raw, payload.type)
    if validated is None:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid content for section type: {payload.type.value}"
        )
    return serialize_section_content(validated)

@router.get("", response_model=List[SectionOut])
@limiter.limit("10/minute")
def list_sections(
    request: Request,
    portfolio: Portfolio = Depends(get_current_portfolio),
    repo: SectionRepository = Depends(get_section_repository)
):
    return repo.list_for_portfolio(portfolio.id)

@router.post("", response_model=SectionOut)
@limiter.limit("5/minute")
def save_section(
    request: Request,
    payload: SectionUpsert,
    portfolio: Portfolio = Depends(get_current_portfolio),
    repo: SectionRepository = Depends(get_section_repository)
):
    """Create a section, or replace the section named by `id`"""
    data = {
        "title": payload.title,
        "type": payload.type.value,
        "content": validated_content(payload),
        "is_published": payload.is_published,
        "order": payload.order,
    }
    try:
        section = repo.upsert(portfolio, data, id=payload.id)
    except SQLAlchemyError as e:
        repo.db.rollback()
        logger.error(f"Error saving section for portfolio {portfolio.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save section")
    if section is None:
        raise HTTPException(status_code=404, detail="Section not found")
    return section

@router.post("/reorder", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("5/minute")
def reorder_sections(
    request: Request,
    payload: SectionReorder,
    portfolio: Portfolio = Depends(get_current_portfolio),
    repo: SectionRepository = Depends(get_section_repository)
):
    orders = {}
    try:
        for item in payload.sections:
            orders[UUID(item.id)] = item.order
        repo.reorder(portfolio.id, orders)
    except (ValueError, InvalidSectionIds):
        raise HTTPException(status_code=400, detail="Invalid section IDs")
    except SQLAlchemyError as e:
        logger.error(f"Error reordering sections for portfolio {portfolio.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to reorder sections")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("5/minute")
def delete_section(
    request: Request,
    id: UUID,
    portfolio: Portfolio = Depends(get_current_portfolio),
    repo: SectionRepository = Depends(get_section_repository)
):
    if not repo.delete(id, portfolio.id):
        raise HTTPException(status_code=404, detail="Section not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
