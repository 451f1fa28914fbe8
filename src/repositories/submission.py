"""Submission repository — stores and manages onboarding submissions."""

from __future__ import annotations

import uuid
from datetime import datetime, time, timedelta, timezone
from typing import Any, Optional

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import SubmissionNotFoundError
from src.models.submission import Submission
from src.schemas.onboarding import (
    OnboardingSubmissionCreateRequest,
    OnboardingSubmissionFilters,
    OnboardingSubmissionUpdateRequest,
    SubmissionStatus,
)

logger = structlog.get_logger()

# Columns copied as-is from an update request when present
_PLAIN_FIELDS = (
    "project_name",
    "company_name",
    "industry",
    "description",
    "name",
    "email",
    "phone",
    "preferred_contact",
    "service_type",
    "budget",
    "timeline",
    "urgency",
    "additional_requirements",
    "inspiration",
    "priority",
    "assigned_to",
    "internal_notes",
    "client_notes",
)


def _plain(value: Any) -> Any:
    return value.value if hasattr(value, "value") else value


def build_update_values(
    update: OnboardingSubmissionUpdateRequest,
    existing: Submission,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Column values for an update.

    Only fields present in the request are touched. ``updated_at`` is always
    refreshed; status ``completed`` stamps ``completed_at``, any other status
    clears an existing one.
    """
    now = now or datetime.now(timezone.utc)
    sent = update.model_fields_set
    values: dict[str, Any] = {"updated_at": now}

    for field in _PLAIN_FIELDS:
        if field in sent:
            values[field] = _plain(getattr(update, field))

    if "service_specific_data" in sent:
        data = update.service_specific_data
        values["service_specific_data"] = (
            data.model_dump(mode="json", by_alias=True, exclude_none=True) if data else None
        )
    if "add_ons" in sent:
        values["add_ons"] = update.add_ons or None

    if "status" in sent and update.status is not None:
        values["status"] = update.status.value
        if update.status == SubmissionStatus.COMPLETED:
            values["completed_at"] = now
        elif existing.completed_at is not None:
            values["completed_at"] = None

    return values


def _parse_id(submission_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(submission_id))
    except ValueError:
        raise SubmissionNotFoundError(submission_id) from None


class SubmissionRepository:
    """CRUD over the onboarding_submissions table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, request: OnboardingSubmissionCreateRequest) -> Submission:
        """Store a new submission with status ``pending``."""
        data = request.service_specific_data
        submission = Submission(
            project_name=request.project_name,
            company_name=request.company_name,
            industry=request.industry,
            description=request.description,
            name=request.name,
            email=request.email,
            phone=request.phone,
            preferred_contact=request.preferred_contact,
            service_type=request.service_type.value,
            budget=request.budget,
            timeline=request.timeline,
            urgency=request.urgency,
            service_specific_data=(
                data.model_dump(mode="json", by_alias=True, exclude_none=True) if data else None
            ),
            additional_requirements=request.additional_requirements,
            inspiration=request.inspiration,
            add_ons=request.add_ons or None,
            status=SubmissionStatus.PENDING.value,
        )

        self.db.add(submission)
        await self.db.flush()

        logger.info(
            "submission_created",
            submission_id=str(submission.id),
            service_type=submission.service_type,
            project_name=submission.project_name,
        )

        return submission

    async def get(self, submission_id: str) -> Submission:
        result = await self.db.execute(
            select(Submission).where(Submission.id == _parse_id(submission_id))
        )
        submission = result.scalar_one_or_none()
        if submission is None:
            raise SubmissionNotFoundError(submission_id)
        return submission

    async def list_page(
        self,
        filters: OnboardingSubmissionFilters,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Submission], int]:
        """Return one page of submissions matching all given filters, newest first."""
        stmt = select(Submission)

        if filters.service_type:
            stmt = stmt.where(Submission.service_type == filters.service_type.value)
        if filters.status:
            stmt = stmt.where(Submission.status == filters.status.value)
        if filters.priority:
            stmt = stmt.where(Submission.priority == filters.priority.value)
        if filters.assigned_to:
            stmt = stmt.where(Submission.assigned_to == filters.assigned_to)
        if filters.date_from:
            start = datetime.combine(filters.date_from, time.min, tzinfo=timezone.utc)
            stmt = stmt.where(Submission.created_at >= start)
        if filters.date_to:
            # date_to is inclusive
            end = datetime.combine(filters.date_to + timedelta(days=1), time.min, tzinfo=timezone.utc)
            stmt = stmt.where(Submission.created_at < end)
        if filters.search:
            pattern = f"%{filters.search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Submission.project_name).like(pattern),
                    func.lower(Submission.company_name).like(pattern),
                    func.lower(Submission.email).like(pattern),
                )
            )

        # Count
        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await self.db.execute(count_stmt)).scalar_one()

        # Fetch page
        stmt = (
            stmt.order_by(Submission.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def update(
        self, submission_id: str, update: OnboardingSubmissionUpdateRequest
    ) -> Submission:
        submission = await self.get(submission_id)
        values = build_update_values(update, submission)

        for column, value in values.items():
            setattr(submission, column, value)
        await self.db.flush()

        logger.info(
            "submission_updated",
            submission_id=submission_id,
            fields=sorted(values),
            status=submission.status,
        )
        return submission

    async def delete(self, submission_id: str) -> None:
        submission = await self.get(submission_id)
        await self.db.delete(submission)
        await self.db.flush()
        logger.info("submission_deleted", submission_id=submission_id)
