"""Domain exceptions raised by the onboarding core and its collaborators."""

from __future__ import annotations

from typing import Optional


class OnboardingError(Exception):
    """Base class for onboarding errors."""


class UnknownServiceError(OnboardingError):
    """Selected service is not in the catalogue."""

    def __init__(self, service: str):
        self.service = service
        super().__init__(f"Unknown service: {service!r}")


class WizardStepError(OnboardingError):
    """Wizard operation is not allowed at the current step."""


class SubmissionNotFoundError(OnboardingError):
    def __init__(self, submission_id: str):
        self.submission_id = submission_id
        super().__init__(f"Onboarding submission {submission_id} not found")


class SubmissionApiError(OnboardingError):
    """External submission API returned an error or was unreachable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
