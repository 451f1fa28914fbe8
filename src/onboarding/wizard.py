"""Onboarding wizard controller.

Drives the five-step flow on top of an OnboardingStore: validates each
step before merging it into the accumulator, keeps the step inside
1..TOTAL_STEPS, and hands the assembled request to the submission gateway.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import structlog
from pydantic import ValidationError

from src.exceptions import WizardStepError
from src.onboarding.branching import build_create_request, resolve_service_type
from src.onboarding.forms import (
    TOTAL_STEPS,
    FieldError,
    WizardStep,
    field_errors,
    validate_step,
)
from src.onboarding.gateway import SubmissionGateway
from src.onboarding.store import OnboardingState, OnboardingStore
from src.schemas.onboarding import OnboardingSubmission, ServiceType

logger = structlog.get_logger()


@dataclass
class WizardResult:
    """Outcome of a wizard action."""

    state: OnboardingState
    errors: list[FieldError] = field(default_factory=list)
    submission: Optional[OnboardingSubmission] = None

    @property
    def ok(self) -> bool:
        return not self.errors


def reference_code(submission_id: str) -> str:
    """Short reference shown to the client after submitting."""
    return f"LXC-{submission_id.replace('-', '')[-8:].upper()}"


class OnboardingWizard:
    def __init__(
        self,
        store: OnboardingStore,
        gateway: Optional[SubmissionGateway] = None,
    ):
        self.store = store
        self.gateway = gateway

    # ─── Read access ─────────────────────────────────────────────────

    @property
    def service_type(self) -> Optional[ServiceType]:
        if not self.store.selected_service:
            return None
        return resolve_service_type(self.store.selected_service)

    @property
    def progress(self) -> float:
        return self.store.current_step / TOTAL_STEPS * 100

    def _result(self, errors: Optional[list[FieldError]] = None, **kwargs) -> WizardResult:
        return WizardResult(state=self.store.snapshot(), errors=errors or [], **kwargs)

    def _require_open(self) -> None:
        if not self.store.is_modal_open:
            raise WizardStepError("Onboarding wizard is not open")

    # ─── Actions ─────────────────────────────────────────────────────

    def open(self, service: str) -> WizardResult:
        """Start the wizard for a catalogue service.

        Raises:
            UnknownServiceError: service is not in the catalogue
        """
        service_type = resolve_service_type(service)
        self.store.open_modal(service)
        logger.info("wizard_opened", service=service, service_type=service_type.value)
        return self._result()

    def update(self, data: dict[str, Any]) -> WizardResult:
        """Merge raw field values without validation (draft autosave)."""
        self._require_open()
        self.store.set_form_data(data)
        return self._result()

    def go_to(self, step: int) -> WizardResult:
        self._require_open()
        if not 1 <= step <= TOTAL_STEPS:
            raise WizardStepError(f"Step must be between 1 and {TOTAL_STEPS}, got {step}")
        self.store.set_current_step(step)
        return self._result()

    def next(self, data: Optional[dict[str, Any]] = None) -> WizardResult:
        """Validate the current step's data, merge it and advance.

        Invalid data leaves the state untouched and is reported in the result.
        """
        self._require_open()
        step = self.store.current_step
        if step >= WizardStep.REVIEW:
            raise WizardStepError("The review step is completed by submitting")

        validation = validate_step(step, data or {}, self.service_type)
        if not validation.is_valid:
            return self._result(validation.errors)

        self.store.set_form_data(validation.data)
        self.store.set_current_step(step + 1)
        return self._result()

    def back(self) -> WizardResult:
        self._require_open()
        step = self.store.current_step
        if 1 < step < WizardStep.CONFIRMATION:
            self.store.set_current_step(step - 1)
        return self._result()

    def close(self) -> WizardResult:
        self.store.close_modal()
        return self._result()

    async def submit(self, review: Optional[dict[str, Any]] = None) -> WizardResult:
        """Confirm the review step and send the assembled request.

        Raises:
            WizardStepError: wizard closed, not on the review step, or no gateway
        """
        self._require_open()
        if self.store.current_step != WizardStep.REVIEW:
            raise WizardStepError("Submission is only possible from the review step")
        if self.gateway is None:
            raise WizardStepError("No submission gateway configured")

        validation = validate_step(WizardStep.REVIEW, review or {})
        if not validation.is_valid:
            return self._result(validation.errors)
        self.store.set_form_data(validation.data)

        try:
            request = build_create_request(self.store.snapshot())
        except ValidationError as e:
            return self._result(field_errors(e))

        submission = await self.gateway.submit(request)

        self.store.set_form_data({"submissionId": submission.id})
        self.store.set_current_step(WizardStep.CONFIRMATION)

        logger.info(
            "wizard_submitted",
            submission_id=submission.id,
            service=self.store.selected_service,
            service_type=request.service_type.value,
        )
        return self._result(submission=submission)
