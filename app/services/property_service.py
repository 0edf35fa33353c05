import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from database.models import Property as PropertyModel, Unit, User
from enums.unit_type import UnitType
from enums.user_role import UserRole, ADMIN_ROLES
from schemas.property_response import PropertyResponse
from schemas.property_schema import PropertyCreate
from services.base_service import BaseService
from utils.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from utils.id_generator import generate_property_id, generate_unit_number

logger = logging.getLogger(__name__)


def format_property_response(prop: PropertyModel) -> PropertyResponse:
    response = PropertyResponse.model_validate(prop)
    response.property_id = generate_property_id(prop.id)
    return response


def build_units(total_units: int) -> List[Unit]:
    """Unoccupied studio units A001, A002, ... with ten units per floor."""
    return [
        Unit(
            unit_number=generate_unit_number(i),
            unit_type=UnitType.STUDIO.value,
            floor=i // 10 + 1,
            is_occupied=False,
        )
        for i in range(total_units)
    ]


def vacate_tenant_unit(db: Session, tenant: User) -> None:
    """Clear the unit a tenant currently occupies, if any. Does not commit."""
    if tenant.id is not None:
        for unit in db.query(Unit).filter(Unit.tenant_id == tenant.id).all():
            unit.is_occupied = False
            unit.tenant = None
    tenant.assigned_property = None
    tenant.assigned_unit = None


def occupy_unit(db: Session, prop: PropertyModel, unit_number: str, tenant: User) -> Unit:
    """
    Move ``tenant`` into ``unit_number`` of ``prop``. Does not commit.

    The unit's occupancy flag and tenant reference are written together with the
    tenant's assigned property and unit, so the caller commits them as one
    transaction.
    """
    if tenant.role != UserRole.TENANT.value:
        raise ValidationError("Only tenants can be assigned to a unit")

    unit = prop.find_unit(unit_number)
    if unit is None:
        raise NotFoundError(f"Unit {unit_number} not found in property {prop.name}")
    if unit.is_occupied and unit.tenant_id != tenant.id:
        raise ConflictError(f"Unit {unit_number} is already occupied")

    vacate_tenant_unit(db, tenant)
    unit.is_occupied = True
    unit.tenant = tenant
    tenant.assigned_property = prop
    tenant.assigned_unit = unit.unit_number
    return unit


class PropertyService(BaseService):
    not_found_message = "Property not found"

    def __init__(self):
        super().__init__(PropertyModel)

    def can_manage(self, prop: PropertyModel, user: User) -> bool:
        if user.role == UserRole.OWNER.value:
            return prop.owner_id == user.id
        if user.role in {r.value for r in ADMIN_ROLES}:
            return any(p.id == prop.id for p in user.managed_properties)
        return False

    def create_property(self, db: Session, owner: User, property_in: PropertyCreate) -> PropertyModel:
        managers = []
        if property_in.manager_ids:
            managers = db.query(User).filter(User.id.in_(property_in.manager_ids)).all()
            if len(managers) != len(set(property_in.manager_ids)):
                raise NotFoundError("One or more managers not found")
            if any(m.role not in {r.value for r in ADMIN_ROLES} for m in managers):
                raise ValidationError("Managers must be admins or senior admins")

        address = property_in.address
        prop = PropertyModel(
            name=property_in.name,
            street=address.street,
            city=address.city,
            state=address.state,
            zip_code=address.zip_code,
            country=address.country,
            property_type=property_in.property_type.value,
            total_units=property_in.total_units,
            amenities=list(property_in.amenities),
            owner_id=owner.id,
            units=build_units(property_in.total_units),
            managers=managers,
        )
        self.save(db, prop)
        logger.info(
            "Property %s created by owner %s with %d units", prop.id, owner.id, prop.total_units
        )
        return prop

    def get_properties(
        self,
        db: Session,
        user: User,
        city: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[PropertyModel]:
        query = db.query(self.model).options(joinedload(self.model.units))
        if user.role == UserRole.OWNER.value:
            query = query.filter(self.model.owner_id == user.id)
        elif user.role in {r.value for r in ADMIN_ROLES}:
            managed_ids = [p.id for p in user.managed_properties]
            if not managed_ids:
                return []
            query = query.filter(self.model.id.in_(managed_ids))
        else:
            raise PermissionDeniedError("Only owners and admins can list properties")

        if city:
            query = query.filter(self.model.city.ilike(f"%{city}%"))
        return query.order_by(self.model.id).offset(skip).limit(limit).all()

    def get_property(self, db: Session, property_id: int, user: User) -> PropertyModel:
        prop = self.get_or_404(db, property_id)
        if not self.can_manage(prop, user):
            raise PermissionDeniedError("You do not manage this property")
        return prop

    def assign_tenant(
        self, db: Session, property_id: int, unit_number: str, tenant_id: int, user: User
    ) -> PropertyModel:
        prop = self.get_property(db, property_id, user)
        tenant = db.query(User).filter(User.id == tenant_id).first()
        if tenant is None:
            raise NotFoundError("Tenant not found")

        occupy_unit(db, prop, unit_number, tenant)
        db.commit()
        db.refresh(prop)
        logger.info("Tenant %s assigned to unit %s of property %s", tenant.id, unit_number, prop.id)
        return prop

    def vacate_unit(self, db: Session, property_id: int, unit_number: str, user: User) -> PropertyModel:
        prop = self.get_property(db, property_id, user)
        unit = prop.find_unit(unit_number)
        if unit is None:
            raise NotFoundError(f"Unit {unit_number} not found in property {prop.name}")
        if not unit.is_occupied:
            raise ValidationError(f"Unit {unit_number} is not occupied")

        tenant = unit.tenant
        if tenant is not None:
            vacate_tenant_unit(db, tenant)
        unit.is_occupied = False
        unit.tenant = None
        db.commit()
        db.refresh(prop)
        logger.info("Unit %s of property %s vacated", unit_number, prop.id)
        return prop
