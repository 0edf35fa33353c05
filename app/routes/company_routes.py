import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.user_model import User
from enums.company_category import CompanyCategory
from enums.user_role import UserRole
from schemas.auth_schema import AssignPropertiesRequest
from schemas.company_schema import CompanyCreate, CompanyResponse
from services.company_service import CompanyService
from utils.dependencies import get_current_user, role_required
from utils.exceptions import TicketingError

from responses.success import created_response, data_response, success_response
from responses.error import error_from_exception, internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["Companies"])

company_service = CompanyService()

owner_only = role_required(UserRole.OWNER)
owner_or_admin = role_required(UserRole.OWNER, UserRole.ADMIN)


@router.post("")
def create_company(
    payload: CompanyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_or_admin),
):
    try:
        company = company_service.create_company(db, payload, current_user)
        return created_response(CompanyResponse.from_company(company), "Company created successfully")
    except TicketingError as e:
        return error_from_exception(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to create company")
        return internal_server_error("Failed to create company")


@router.get("")
def get_companies(
    category: Optional[CompanyCategory] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        companies = company_service.get_companies(db, category=category, skip=skip, limit=limit)
        return data_response([CompanyResponse.from_company(c) for c in companies])
    except Exception:
        logger.exception("Failed to fetch companies")
        return internal_server_error("Failed to fetch companies")


@router.delete("/{company_id}")
def delete_company(
    company_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_or_admin),
):
    try:
        company_service.delete_company(db, company_id, current_user)
        return success_response("Company deleted successfully")
    except TicketingError as e:
        return error_from_exception(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to delete company %s", company_id)
        return internal_server_error("Failed to delete company")


@router.post("/{company_id}/assign-properties")
def assign_properties(
    company_id: int,
    payload: AssignPropertiesRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_only),
):
    try:
        company = company_service.assign_properties(
            db, company_id, payload.property_ids, current_user
        )
        return data_response(CompanyResponse.from_company(company), "Properties assigned successfully")
    except TicketingError as e:
        return error_from_exception(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to assign properties to company %s", company_id)
        return internal_server_error("Failed to assign properties")
