"""External submission API client.

The studio's back office exposes the onboarding flow endpoints; this
client only forwards creation requests to it.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
import structlog
from pydantic import ValidationError

from src.config import settings
from src.exceptions import SubmissionApiError
from src.schemas.onboarding import (
    OnboardingSubmission,
    OnboardingSubmissionCreateRequest,
)

logger = structlog.get_logger()

SUBMIT_PATH = "/onboarding/flow/submit"

_client: Optional["SubmissionApiClient"] = None


class SubmissionApiClient:
    """Async wrapper around the external onboarding endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
            headers={"Content-Type": "application/json"},
        )

    async def create_submission(
        self, request: OnboardingSubmissionCreateRequest
    ) -> OnboardingSubmission:
        """POST a creation request and return the created submission.

        Raises:
            SubmissionApiError: not configured, unreachable, non-2xx reply,
                or a reply that is not a submission
        """
        if not self.enabled:
            raise SubmissionApiError("Submission API is not configured")

        payload = request.model_dump(mode="json", by_alias=True, exclude_none=True)

        try:
            async with self._http() as http:
                response = await http.post(SUBMIT_PATH, json=payload)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "submission_api_error",
                status=e.response.status_code,
                service_type=request.service_type.value,
            )
            raise SubmissionApiError(
                f"External API error: {e.response.status_code} {e.response.reason_phrase}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.warning("submission_api_unavailable", error=str(e))
            raise SubmissionApiError(f"External API not available: {e}") from e
        except ValueError as e:
            raise SubmissionApiError("External API returned invalid JSON") from e

        return self._parse_submission(body, request)

    def _parse_submission(
        self, body: Any, request: OnboardingSubmissionCreateRequest
    ) -> OnboardingSubmission:
        # Accept both a bare submission and a {"success": ..., "data": ...} envelope
        if isinstance(body, dict) and "success" in body:
            if body["success"] is False:
                raise SubmissionApiError(body.get("error") or "External API rejected submission")
            body = body.get("data")

        if not isinstance(body, dict):
            raise SubmissionApiError("External API returned an unexpected payload")

        # Fill anything the API did not echo back from our own request
        merged = {**request.model_dump(by_alias=True, exclude_none=True), **body}
        try:
            submission = OnboardingSubmission.model_validate(merged)
        except ValidationError as e:
            raise SubmissionApiError("External API returned an invalid submission") from e

        logger.info(
            "submission_forwarded",
            submission_id=submission.id,
            service_type=submission.service_type.value,
        )
        return submission


def get_submission_api() -> SubmissionApiClient:
    """Get or create the submission API client (FastAPI dependency)."""
    global _client
    if _client is None:
        _client = SubmissionApiClient(
            base_url=settings.submission_api_base_url,
            timeout=settings.submission_api_timeout,
        )
    return _client
