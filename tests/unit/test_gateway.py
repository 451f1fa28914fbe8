"""Tests for the submission gateway (external API with local fallback)."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.exceptions import SubmissionApiError
from src.onboarding.gateway import SubmissionGateway
from src.repositories.submission import SubmissionRepository
from src.schemas.onboarding import (
    OnboardingSubmission,
    OnboardingSubmissionCreateRequest,
    OnboardingSubmissionFilters,
)

REMOTE_ID = "11111111-2222-3333-4444-555555555555"


@pytest.fixture
def create_request():
    return OnboardingSubmissionCreateRequest.model_validate({
        "projectName": "Gym App",
        "name": "Coach Ana",
        "email": "ana@gym.example",
        "serviceType": "mobile_app",
        "serviceSpecificData": {"platforms": ["both"]},
    })


def _api(enabled: bool = True, **kwargs):
    api = MagicMock()
    api.enabled = enabled
    api.create_submission = AsyncMock(**kwargs)
    return api


@pytest.mark.asyncio
class TestSubmissionGateway:
    async def test_forwards_to_api(self, db_session, create_request):
        remote = OnboardingSubmission.model_validate(
            {**create_request.model_dump(), "id": REMOTE_ID}
        )
        api = _api(return_value=remote)
        gateway = SubmissionGateway(api, SubmissionRepository(db_session))

        submission = await gateway.submit(create_request)

        assert submission.id == REMOTE_ID
        api.create_submission.assert_awaited_once_with(create_request)
        _, total = await SubmissionRepository(db_session).list_page(
            OnboardingSubmissionFilters()
        )
        assert total == 0

    async def test_falls_back_to_local_store(self, db_session, create_request):
        api = _api(side_effect=SubmissionApiError("External API error: 502 Bad Gateway", status_code=502))
        gateway = SubmissionGateway(api, SubmissionRepository(db_session))

        submission = await gateway.submit(create_request)

        assert submission.id
        assert submission.status.value == "pending"
        stored = await SubmissionRepository(db_session).get(submission.id)
        assert stored.project_name == "Gym App"

    async def test_disabled_api_is_not_called(self, db_session, create_request):
        api = _api(enabled=False)
        gateway = SubmissionGateway(api, SubmissionRepository(db_session))

        submission = await gateway.submit(create_request)

        api.create_submission.assert_not_awaited()
        assert submission.service_specific_data.platforms[0].value == "both"
