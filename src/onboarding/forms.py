"""Wizard step forms — per-step validation of onboarding input.

Steps: 1 service selection, 2 basic info, 3 service requirements,
4 review, 5 confirmation. Only steps 2-4 collect data.
"""

from __future__ import annotations

import re
from enum import IntEnum
from typing import Any, Literal, Optional

import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

from src.schemas.onboarding import CamelModel, Platform, ServiceType

logger = structlog.get_logger()

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class WizardStep(IntEnum):
    SERVICE_SELECTION = 1
    BASIC_INFO = 2
    SERVICE_REQUIREMENTS = 3
    REVIEW = 4
    CONFIRMATION = 5


TOTAL_STEPS = len(WizardStep)


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


# ─── Step forms ─────────────────────────────────────────────────────


class BasicInfoForm(CamelModel):
    project_name: str
    company_name: str
    industry: str
    project_description: str = Field(min_length=10)
    contact_email: str
    contact_phone: Optional[str] = None
    preferred_contact: Literal["email", "phone", "both"] = "email"

    @field_validator("project_name", "company_name", "industry")
    @classmethod
    def _required(cls, value: str) -> str:
        return _not_blank(value)

    @field_validator("contact_email")
    @classmethod
    def _email(cls, value: str) -> str:
        if not EMAIL_RE.match(value):
            raise ValueError("Invalid email address")
        return value


class LandingPageRequirements(CamelModel):
    page_type: str
    design_style: str
    sections: list[str] = Field(min_length=1)
    cta_goal: str
    brand_colors: Optional[str] = None
    competitor_examples: Optional[str] = None
    content_provided: bool = False

    @field_validator("page_type", "design_style", "cta_goal")
    @classmethod
    def _required(cls, value: str) -> str:
        return _not_blank(value)


class WebAppRequirements(CamelModel):
    website_type: str
    page_count: str
    features: list[str] = Field(min_length=1)
    content_source: str
    user_roles: Optional[list[str]] = None
    integrations: Optional[list[str]] = None
    security_requirements: Optional[str] = None

    @field_validator("website_type", "page_count", "content_source")
    @classmethod
    def _required(cls, value: str) -> str:
        return _not_blank(value)


class MobileAppRequirements(CamelModel):
    app_category: str
    platforms: list[Platform] = Field(min_length=1)
    core_features: list[str] = Field(min_length=1)
    backend: list[str] = Field(min_length=1)
    target_users: Optional[str] = None
    design_requirements: Optional[str] = None
    monetization: Optional[str] = None

    @field_validator("app_category")
    @classmethod
    def _required(cls, value: str) -> str:
        return _not_blank(value)


class ReviewForm(CamelModel):
    confirm_details: bool
    agree_to_terms: bool
    additional_notes: Optional[str] = None

    @field_validator("confirm_details")
    @classmethod
    def _confirmed(cls, value: bool) -> bool:
        if not value:
            raise ValueError("You must confirm the project details")
        return value

    @field_validator("agree_to_terms")
    @classmethod
    def _agreed(cls, value: bool) -> bool:
        if not value:
            raise ValueError("You must agree to the terms and conditions")
        return value


REQUIREMENT_FORMS: dict[ServiceType, type[CamelModel]] = {
    ServiceType.LANDING_PAGE: LandingPageRequirements,
    ServiceType.WEB_APP: WebAppRequirements,
    ServiceType.MOBILE_APP: MobileAppRequirements,
}


# ─── Validation results ─────────────────────────────────────────────


class FieldError(BaseModel):
    field: str
    message: str
    code: str


class ValidationResult(BaseModel):
    is_valid: bool = Field(serialization_alias="isValid")
    errors: list[FieldError] = []
    # Validated data with camelCase keys, ready to merge into the accumulator
    data: dict[str, Any] = {}


def get_step_form(
    step: int, service_type: Optional[ServiceType] = None
) -> Optional[type[CamelModel]]:
    """Return the form model for a step, or None if the step collects nothing."""
    if step == WizardStep.BASIC_INFO:
        return BasicInfoForm
    if step == WizardStep.SERVICE_REQUIREMENTS:
        if service_type is None:
            return None
        return REQUIREMENT_FORMS[service_type]
    if step == WizardStep.REVIEW:
        return ReviewForm
    return None


def field_errors(exc: ValidationError) -> list[FieldError]:
    errors = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "__root__"
        message = err["msg"].removeprefix("Value error, ")
        errors.append(FieldError(field=loc, message=message, code=err["type"]))
    return errors


def validate_step(
    step: int,
    data: dict[str, Any],
    service_type: Optional[ServiceType] = None,
) -> ValidationResult:
    """Validate the data submitted for a wizard step.

    Never raises for invalid input; errors are reported in the result.
    """
    form = get_step_form(step, service_type)
    if form is None:
        return ValidationResult(is_valid=True, data=dict(data))

    try:
        parsed = form.model_validate(data)
    except ValidationError as e:
        errors = field_errors(e)
        logger.info(
            "wizard_step_invalid",
            step=step,
            service_type=service_type.value if service_type else None,
            fields=[err.field for err in errors],
        )
        return ValidationResult(is_valid=False, errors=errors)

    return ValidationResult(
        is_valid=True,
        data=parsed.model_dump(mode="json", by_alias=True, exclude_none=True),
    )
