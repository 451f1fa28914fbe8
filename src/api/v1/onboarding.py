"""Onboarding submissions API — public create, admin list/get/update/delete."""

from typing import Optional

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from src.admin.dependencies import require_admin
from src.api.responses import api_response
from src.clients.submission_api import SubmissionApiClient, get_submission_api
from src.database import get_db
from src.exceptions import SubmissionNotFoundError
from src.onboarding.gateway import SubmissionGateway
from src.repositories.submission import SubmissionRepository
from src.schemas.onboarding import (
    OnboardingSubmission,
    OnboardingSubmissionCreateRequest,
    OnboardingSubmissionFilters,
    OnboardingSubmissionListResponse,
    OnboardingSubmissionUpdateRequest,
    ServiceType,
    SubmissionPriority,
    SubmissionStatus,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/api/cms/onboarding", tags=["onboarding"])


def check_required_fields(body: dict) -> list[str]:
    """Minimal checks applied to public submissions before parsing."""
    errors = []

    project_name = body.get("projectName")
    if not project_name or (isinstance(project_name, str) and not project_name.strip()):
        errors.append("Project name is required")

    email = body.get("contactEmail") or body.get("email")
    if not email or (isinstance(email, str) and "@" not in email):
        errors.append("Valid email address is required")

    if not body.get("serviceType"):
        errors.append("Service type is required")

    return errors


@router.post("")
async def create_submission(
    body: dict = Body(...),
    db: AsyncSession = Depends(get_db),
    api: SubmissionApiClient = Depends(get_submission_api),
):
    """Create a submission (public). Forwarded to the external API,
    stored locally when that is unavailable.
    """
    errors = check_required_fields(body)
    if errors:
        logger.info("submission_rejected", errors=errors)
        raise HTTPException(status_code=400, detail="Validation failed")

    payload = dict(body)
    payload["email"] = body.get("contactEmail") or body.get("email")
    payload["phone"] = body.get("contactPhone") or body.get("phone")
    payload.setdefault("name", body.get("companyName") or "Unknown")

    try:
        request = OnboardingSubmissionCreateRequest.model_validate(payload)
    except ValidationError as e:
        logger.info("submission_invalid", errors=e.error_count())
        raise HTTPException(status_code=400, detail="Validation failed")

    gateway = SubmissionGateway(api, SubmissionRepository(db))
    submission = await gateway.submit(request)
    return api_response(submission)


@router.get("")
async def list_submissions(
    service_type: Optional[ServiceType] = Query(None, alias="serviceType"),
    status: Optional[SubmissionStatus] = Query(None),
    priority: Optional[SubmissionPriority] = Query(None),
    assigned_to: Optional[str] = Query(None, alias="assignedTo"),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """List submissions matching all given filters (admin)."""
    try:
        filters = OnboardingSubmissionFilters(
            service_type=service_type,
            status=status,
            priority=priority,
            assigned_to=assigned_to,
            date_from=date_from,
            date_to=date_to,
            search=search,
        )
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid filters")

    rows, total = await SubmissionRepository(db).list_page(filters, page=page, limit=limit)

    return api_response(
        OnboardingSubmissionListResponse.build(
            submissions=[OnboardingSubmission.model_validate(row) for row in rows],
            total=total,
            page=page,
            limit=limit,
        )
    )


@router.get("/{submission_id}")
async def get_submission(
    submission_id: str,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        row = await SubmissionRepository(db).get(submission_id)
    except SubmissionNotFoundError:
        raise HTTPException(status_code=404, detail="Onboarding submission not found")

    return api_response(OnboardingSubmission.model_validate(row))


@router.put("/{submission_id}")
async def update_submission(
    submission_id: str,
    body: dict = Body(...),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Update a submission (admin). ``serviceType`` cannot change."""
    repo = SubmissionRepository(db)
    try:
        existing = await repo.get(submission_id)
    except SubmissionNotFoundError:
        raise HTTPException(status_code=404, detail="Onboarding submission not found")

    try:
        update = OnboardingSubmissionUpdateRequest.model_validate(
            body, context={"service_type": existing.service_type}
        )
    except ValidationError as e:
        logger.info("submission_update_invalid", submission_id=submission_id, errors=e.error_count())
        raise HTTPException(status_code=400, detail="Validation failed")

    row = await repo.update(submission_id, update)
    return api_response(OnboardingSubmission.model_validate(row))


@router.delete("/{submission_id}")
async def delete_submission(
    submission_id: str,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        await SubmissionRepository(db).delete(submission_id)
    except SubmissionNotFoundError:
        raise HTTPException(status_code=404, detail="Onboarding submission not found")

    return api_response({"message": "Onboarding submission deleted successfully"})
