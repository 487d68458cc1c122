from typing import Generic, TypeVar, Type, Optional, List, Dict
from sqlalchemy.orm import Session
from uuid import UUID
import logging
from .database import Base
from .models import CustomSection, Portfolio

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)

class OwnedRepository(Generic[ModelType]):
    """CRUD for rows owned through a `user_id` column; every lookup is scoped to the owner"""

    def __init__(self, model: Type[ModelType], db: Session, order_by=None):
        self.model = model
        self.db = db
        self.order_by = order_by or []

    def get(self, id: UUID, user_id: UUID) -> Optional[ModelType]:
        return self.db.query(self.model).filter(
            self.model.id == id,
            self.model.user_id == user_id
        ).first()

    def get_by_user_id(self, user_id: UUID) -> List[ModelType]:
        return self.db.query(self.model).filter(
            self.model.user_id == user_id
        ).order_by(*self.order_by).all()

    def create(self, user_id: UUID, obj_in: dict) -> ModelType:
        db_obj = self.model(user_id=user_id, **obj_in)
        self.db.add(db_obj)
        self.db.commit()
        self.db.refresh(db_obj)
        return db_obj

    def update(self, db_obj: ModelType, obj_in: dict) -> ModelType:
        for field, value in obj_in.items():
            setattr(db_obj, field, value)
        self.db.commit()
        self.db.refresh(db_obj)
        return db_obj

    def delete(self, id: UUID, user_id: UUID) -> bool:
        obj = self.get(id, user_id)
        if obj:
            self.db.delete(obj)
            self.db.commit()
            return True
        return False

class InvalidSectionIds(Exception):
    """A reorder batch referenced sections outside the caller's portfolio"""

class SectionRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_for_portfolio(self, portfolio_id: UUID, published_only: bool = False) -> List[CustomSection]:
        query = self.db.query(CustomSection).filter(CustomSection.portfolio_id == portfolio_id)
        if published_only:
            query = query.filter(CustomSection.is_published.is_(True))
        # equal orders fall back to creation time, then id
        return query.order_by(
            CustomSection.order.asc(),
            CustomSection.created_at.asc(),
            CustomSection.id.asc()
        ).all()

    def get(self, id: UUID, portfolio_id: UUID) -> Optional[CustomSection]:
        return self.db.query(CustomSection).filter(
            CustomSection.id == id,
            CustomSection.portfolio_id == portfolio_id
        ).first()

    def upsert(self, portfolio: Portfolio, obj_in: dict, id: Optional[UUID] = None) -> Optional[CustomSection]:
        """Update the section `id` if given, otherwise create one; None if `id` is not in this portfolio"""
        if id is not None:
            section = self.get(id, portfolio.id)
            if section is None:
                return None
            for field, value in obj_in.items():
                setattr(section, field, value)
        else:
            section = CustomSection(portfolio_id=portfolio.id, **obj_in)
            self.db.add(section)
        self.db.commit()
        self.db.refresh(section)
        return section

    def delete(self, id: UUID, portfolio_id: UUID) -> bool:
        section = self.get(id, portfolio_id)
        if section is None:
            return False
        self.db.delete(section)
        self.db.commit()
        return True

    def reorder(self, portfolio_id: UUID, orders: Dict[UUID, int]) -> None:
        """
        Apply a batch of id -> order assignments in one transaction.
        Raises InvalidSectionIds without touching any row if an id is not in the portfolio.
        """
        if not orders:
            return
        sections = self.db.query(CustomSection).filter(
            CustomSection.portfolio_id == portfolio_id,
            CustomSection.id.in_(list(orders.keys()))
        ).all()
        if len(sections) != len(orders):
            found = {s.id for s in sections}
            logger.warning(f"Reorder rejected for portfolio {portfolio_id}: unknown ids {[str(i) for i in orders if i not in found]}")
            raise InvalidSectionIds()
        try:
            for section in sections:
                section.order = orders[section.id]
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
