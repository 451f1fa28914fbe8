"""Hands creation requests to the external submission API.

When the external API is not configured or fails, the submission is kept
in the local database so no project request is lost.
"""

from __future__ import annotations

import structlog

from src.clients.submission_api import SubmissionApiClient
from src.exceptions import SubmissionApiError
from src.repositories.submission import SubmissionRepository
from src.schemas.onboarding import (
    OnboardingSubmission,
    OnboardingSubmissionCreateRequest,
)

logger = structlog.get_logger()


class SubmissionGateway:
    def __init__(self, api: SubmissionApiClient, repository: SubmissionRepository):
        self.api = api
        self.repository = repository

    async def submit(self, request: OnboardingSubmissionCreateRequest) -> OnboardingSubmission:
        if self.api.enabled:
            try:
                return await self.api.create_submission(request)
            except SubmissionApiError as e:
                logger.warning(
                    "submission_api_fallback",
                    error=str(e),
                    status=e.status_code,
                    service_type=request.service_type.value,
                )

        row = await self.repository.create(request)
        return OnboardingSubmission.model_validate(row)
