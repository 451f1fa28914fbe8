"""Tests for the external submission API client."""

import json

import httpx
import pytest

from src.clients.submission_api import SUBMIT_PATH, SubmissionApiClient
from src.exceptions import SubmissionApiError
from src.schemas.onboarding import (
    OnboardingSubmissionCreateRequest,
    ServiceType,
    SubmissionStatus,
)

BASE_URL = "https://api.studio.example"
SUBMISSION_ID = "9b1deb4d-3b7d-4bad-9bdd-2b0d7b3dcb6d"


@pytest.fixture
def request_model():
    return OnboardingSubmissionCreateRequest.model_validate({
        "projectName": "Clinic Portal",
        "name": "Dr. Reyes",
        "email": "reyes@clinic.example",
        "serviceType": "web_app",
        "serviceSpecificData": {"features": ["booking"]},
    })


def _client(handler) -> SubmissionApiClient:
    return SubmissionApiClient(BASE_URL, transport=httpx.MockTransport(handler))


class TestSubmissionApiClient:
    def test_disabled_without_base_url(self):
        assert SubmissionApiClient("").enabled is False
        assert SubmissionApiClient(BASE_URL).enabled is True

    @pytest.mark.asyncio
    async def test_disabled_client_raises(self, request_model):
        with pytest.raises(SubmissionApiError, match="not configured"):
            await SubmissionApiClient("").create_submission(request_model)

    @pytest.mark.asyncio
    async def test_posts_camel_case_payload(self, request_model):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"id": SUBMISSION_ID, "status": "pending"})

        submission = await _client(handler).create_submission(request_model)

        assert seen["path"] == SUBMIT_PATH
        assert seen["body"]["projectName"] == "Clinic Portal"
        assert seen["body"]["serviceSpecificData"]["serviceType"] == "web_app"
        assert submission.id == SUBMISSION_ID
        assert submission.project_name == "Clinic Portal"
        assert submission.service_type == ServiceType.WEB_APP

    @pytest.mark.asyncio
    async def test_accepts_envelope(self, request_model):
        def handler(request):
            return httpx.Response(
                200,
                json={"success": True, "data": {"id": SUBMISSION_ID, "status": "in-progress"}},
            )

        submission = await _client(handler).create_submission(request_model)

        assert submission.id == SUBMISSION_ID
        assert submission.status == SubmissionStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_rejected_envelope(self, request_model):
        def handler(request):
            return httpx.Response(200, json={"success": False, "error": "Duplicate submission"})

        with pytest.raises(SubmissionApiError, match="Duplicate submission"):
            await _client(handler).create_submission(request_model)

    @pytest.mark.asyncio
    async def test_http_error_status(self, request_model):
        def handler(request):
            return httpx.Response(503)

        with pytest.raises(SubmissionApiError) as exc_info:
            await _client(handler).create_submission(request_model)

        assert exc_info.value.status_code == 503
        assert "503" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unreachable(self, request_model):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(SubmissionApiError, match="not available") as exc_info:
            await _client(handler).create_submission(request_model)

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_invalid_json(self, request_model):
        def handler(request):
            return httpx.Response(200, content=b"<html>oops</html>")

        with pytest.raises(SubmissionApiError, match="invalid JSON"):
            await _client(handler).create_submission(request_model)

    @pytest.mark.asyncio
    async def test_unexpected_payload(self, request_model):
        def handler(request):
            return httpx.Response(200, json=["not", "a", "submission"])

        with pytest.raises(SubmissionApiError, match="unexpected payload"):
            await _client(handler).create_submission(request_model)
