import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.user_model import User
from enums.user_role import UserRole
from schemas.property_schema import AssignTenantRequest, PropertyCreate, VacateUnitRequest
from services.property_service import PropertyService, format_property_response
from utils.dependencies import role_required
from utils.exceptions import TicketingError

from responses.success import created_response, data_response
from responses.error import error_from_exception, internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/properties", tags=["Properties"])

property_service = PropertyService()

owner_only = role_required(UserRole.OWNER)
managers = role_required(UserRole.OWNER, UserRole.ADMIN, UserRole.SENIOR_ADMIN)
owner_or_admin = role_required(UserRole.OWNER, UserRole.ADMIN)


@router.post("")
def create_property(
    property_in: PropertyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_only),
):
    """Create a property together with its generated units"""
    try:
        prop = property_service.create_property(db, current_user, property_in)
        return created_response(format_property_response(prop), "Property created successfully")
    except TicketingError as e:
        return error_from_exception(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to create property")
        return internal_server_error("Failed to create property")


@router.get("")
def get_properties(
    city: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(managers),
):
    try:
        properties = property_service.get_properties(
            db, current_user, city=city, skip=skip, limit=limit
        )
        return data_response([format_property_response(p) for p in properties])
    except TicketingError as e:
        return error_from_exception(e)
    except Exception:
        logger.exception("Failed to fetch properties")
        return internal_server_error("Failed to fetch properties")


@router.get("/{property_id}")
def get_property(
    property_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(managers),
):
    try:
        prop = property_service.get_property(db, property_id, current_user)
        return data_response(format_property_response(prop))
    except TicketingError as e:
        return error_from_exception(e)
    except Exception:
        logger.exception("Failed to fetch property %s", property_id)
        return internal_server_error("Failed to fetch property")


@router.post("/{property_id}/assign-tenant")
def assign_tenant(
    property_id: int,
    payload: AssignTenantRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_or_admin),
):
    try:
        prop = property_service.assign_tenant(
            db, property_id, payload.unit_number, payload.tenant_id, current_user
        )
        return data_response(format_property_response(prop), "Tenant assigned successfully")
    except TicketingError as e:
        db.rollback()
        return error_from_exception(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to assign tenant to property %s", property_id)
        return internal_server_error("Failed to assign tenant")


@router.post("/{property_id}/vacate-unit")
def vacate_unit(
    property_id: int,
    payload: VacateUnitRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_or_admin),
):
    try:
        prop = property_service.vacate_unit(db, property_id, payload.unit_number, current_user)
        return data_response(format_property_response(prop), "Unit vacated successfully")
    except TicketingError as e:
        db.rollback()
        return error_from_exception(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to vacate unit of property %s", property_id)
        return internal_server_error("Failed to vacate unit")
