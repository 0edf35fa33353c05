import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from database.models import Company, Property, Ticket, User
from enums.user_role import UserRole
from schemas.company_schema import CompanyCreate
from services.base_service import BaseService
from utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class CompanyService(BaseService):
    not_found_message = "Company not found"

    def __init__(self):
        super().__init__(Company)

    def _owner_for(self, db: Session, user: User) -> User:
        """Companies belong to the owner account, also when an admin registers them."""
        if user.role == UserRole.OWNER.value:
            return user
        owner = (
            db.query(User)
            .filter(User.role == UserRole.OWNER.value)
            .order_by(User.id)
            .first()
        )
        if owner is None:
            raise ValidationError("No owner account exists")
        return owner

    def _owned_properties(self, db: Session, property_ids: List[int], owner: User) -> List[Property]:
        if not property_ids:
            return []
        properties = (
            db.query(Property)
            .filter(Property.id.in_(property_ids), Property.owner_id == owner.id)
            .all()
        )
        if len(properties) != len(set(property_ids)):
            raise NotFoundError("One or more properties not found or not owned by the owner")
        return properties

    def create_company(self, db: Session, payload: CompanyCreate, user: User) -> Company:
        owner = self._owner_for(db, user)
        company = Company(
            name=payload.name,
            category=payload.category.value,
            phone=payload.phone,
            email=payload.email,
            owner_id=owner.id,
            service_properties=self._owned_properties(db, payload.service_property_ids, owner),
        )
        self.save(db, company)
        logger.info("Company %s (%s) created by user %s", company.id, company.category, user.id)
        return company

    def get_companies(
        self, db: Session, category: Optional[str] = None, skip: int = 0, limit: int = 100
    ) -> List[Company]:
        query = db.query(Company)
        if category:
            query = query.filter(Company.category == getattr(category, "value", category))
        return query.order_by(Company.name).offset(skip).limit(limit).all()

    def delete_company(self, db: Session, company_id: int, user: User) -> None:
        company = self.get_or_404(db, company_id)
        cleared = (
            db.query(Ticket)
            .filter(Ticket.company_id == company.id)
            .update({Ticket.company_id: None}, synchronize_session="fetch")
        )
        db.delete(company)
        db.commit()
        logger.info(
            "Company %s deleted by user %s, cleared from %d ticket(s)", company_id, user.id, cleared
        )

    def assign_properties(
        self, db: Session, company_id: int, property_ids: List[int], owner: User
    ) -> Company:
        company = self.get_or_404(db, company_id)
        company.service_properties = self._owned_properties(db, property_ids, owner)
        db.commit()
        db.refresh(company)
        logger.info(
            "Company %s now services properties %s",
            company.id,
            [p.id for p in company.service_properties],
        )
        return company
