"""Companies API: create a company with its first admin, read a company."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    audit,
    authorize,
    get_company_creation_service,
    get_company_repo,
    require_roles,
)
from app.application.dtos.user import UserResult
from app.application.services import CompanyCreationService
from app.core.limiter import limit_create_company
from app.domain.enums import Permission, PrimaryRole
from app.domain.exceptions import ResourceNotFoundException
from app.infrastructure.persistence.repositories import CompanyRepository
from app.schemas.common import ApiResponse, ok
from app.schemas.company import (
    CompanyCreateRequest,
    CompanyCreateResponse,
    CompanyResponse,
)
from app.schemas.user import UserResponse
from app.shared.enums import AuditAction, AuditModule

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[CompanyCreateResponse],
    status_code=201,
    dependencies=[
        Depends(audit(AuditAction.CREATE, AuditModule.COMPANY, body_keys=("name",)))
    ],
)
@limit_create_company
async def create_company(
    request: Request,
    body: CompanyCreateRequest,
    current_user: Annotated[UserResult, Depends(require_roles(PrimaryRole.SUPER_ADMIN))],
    company_svc: Annotated[CompanyCreationService, Depends(get_company_creation_service)],
):
    """Create a company and its first ADMIN user in one transaction (super-admin only).

    If the admin cannot be created the company insert is rolled back too.
    """
    result = await company_svc.create_company(
        name=body.name,
        admin_email=str(body.admin_email),
        admin_name=body.admin_name,
        admin_password=body.admin_password.get_secret_value(),
        plan=body.plan,
        driver_limit=body.driver_limit,
    )
    request.state.audit_spec = request.state.audit_spec.with_reference(
        company_id=result.company.id, admin_id=result.admin.id
    )
    logger.info("Company %s created by %s", result.company.id, current_user.id)
    data = CompanyCreateResponse(
        company=CompanyResponse.model_validate(result.company),
        admin=UserResponse.model_validate(result.admin),
    )
    return ok(data, "Company created successfully")


@router.get("/{company_id}", response_model=ApiResponse[CompanyResponse])
async def get_company(
    company_id: str,
    current_user: Annotated[
        UserResult,
        Depends(authorize(company_scoped=True, permissions=[Permission.COMPANY_READ])),
    ],
    company_repo: Annotated[CompanyRepository, Depends(get_company_repo)],
):
    """Get a company. Tenant-scoped callers may only read their own."""
    company = await company_repo.get_by_id(company_id)
    if company is None:
        raise ResourceNotFoundException("company", company_id)
    return ok(CompanyResponse.model_validate(company), "Company retrieved")
