"""Onboarding submission schemas shared by the wizard and the CRUD API.

Wire format is camelCase JSON (``projectName``, ``serviceType`` ...),
Python attributes are snake_case. Service-specific data is a tagged union
discriminated by ``serviceType``.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class ServiceType(str, Enum):
    LANDING_PAGE = "landing_page"
    WEB_APP = "web_app"
    MOBILE_APP = "mobile_app"


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    REJECTED = "rejected"


class SubmissionPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Platform(str, Enum):
    IOS = "ios"
    ANDROID = "android"
    BOTH = "both"


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─── Service-specific data (tagged union) ───────────────────────────


class _ServiceDataBase(CamelModel):
    # Catalogue key picked on the landing page, e.g. "basic_website"
    original_service: Optional[str] = None


class LandingPageData(_ServiceDataBase):
    service_type: Literal["landing_page"] = "landing_page"

    business_type: Optional[str] = None
    target_audience: Optional[str] = None
    primary_goal: Optional[str] = None
    conversion_type: Optional[str] = None
    key_features: Optional[list[str]] = None
    brand_colors: Optional[str] = None
    design_style: Optional[str] = None
    content_provided: Optional[bool] = None
    competitor_examples: Optional[str] = None

    # Wizard requirements step
    page_type: Optional[str] = None
    sections: Optional[list[str]] = None
    cta_goal: Optional[str] = None


class WebAppData(_ServiceDataBase):
    service_type: Literal["web_app"] = "web_app"

    app_type: Optional[str] = None
    user_roles: Optional[list[str]] = None
    core_features: Optional[list[str]] = None
    integrations: Optional[list[str]] = None
    scalability_requirements: Optional[str] = None
    security_requirements: Optional[str] = None
    performance_requirements: Optional[str] = None
    technical_requirements: Optional[str] = None
    existing_branding: Optional[bool] = None

    # Wizard requirements step
    website_type: Optional[str] = None
    page_count: Optional[str] = None
    features: Optional[list[str]] = None
    content_source: Optional[str] = None


class MobileAppData(_ServiceDataBase):
    service_type: Literal["mobile_app"] = "mobile_app"

    platforms: Optional[list[Platform]] = None
    app_category: Optional[str] = None
    target_users: Optional[str] = None
    core_features: Optional[list[str]] = None
    design_requirements: Optional[str] = None
    integrations: Optional[list[str]] = None
    monetization: Optional[str] = None
    app_store_requirements: Optional[str] = None
    marketing_support: Optional[bool] = None

    # Wizard requirements step
    backend: Optional[list[str]] = None


ServiceSpecificData = Annotated[
    Union[LandingPageData, WebAppData, MobileAppData],
    Field(discriminator="service_type"),
]


def _tag_value(value: Any) -> Optional[str]:
    if isinstance(value, Enum):
        return value.value
    return value


def _tag_service_specific_data(data: Any, fallback: Any = None) -> Any:
    """Copy the enclosing serviceType into an untagged serviceSpecificData dict."""
    if not isinstance(data, dict):
        return data

    key = "serviceSpecificData" if "serviceSpecificData" in data else "service_specific_data"
    payload = data.get(key)
    if not isinstance(payload, dict):
        return data
    if payload.get("serviceType") is not None or payload.get("service_type") is not None:
        return data

    tag = data.get("serviceType", data.get("service_type")) or fallback
    if tag is None:
        return data

    return {**data, key: {**payload, "serviceType": _tag_value(tag)}}


def _check_tag_agreement(service_type: Any, payload: Any) -> None:
    if service_type is None or payload is None:
        return
    if _tag_value(payload.service_type) != _tag_value(service_type):
        raise ValueError(
            f"serviceSpecificData is tagged {payload.service_type!r} "
            f"but serviceType is {_tag_value(service_type)!r}"
        )


def _unique(values: Optional[list[str]]) -> Optional[list[str]]:
    if values is None:
        return None
    return list(dict.fromkeys(values))


# ─── Submission ─────────────────────────────────────────────────────


class OnboardingSubmission(CamelModel):
    """A stored onboarding submission."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: Optional[str] = None

    # Basic information
    project_name: str
    company_name: Optional[str] = None
    industry: Optional[str] = None
    description: Optional[str] = None

    # Contact
    name: str
    email: str
    phone: Optional[str] = None
    preferred_contact: Optional[str] = None

    # Service
    service_type: ServiceType
    budget: Optional[str] = None
    timeline: Optional[str] = None
    urgency: Optional[str] = None
    service_specific_data: Optional[ServiceSpecificData] = None

    # Additional requirements
    additional_requirements: Optional[str] = None
    inspiration: Optional[str] = None
    add_ons: Optional[list[str]] = None

    # Workflow
    status: SubmissionStatus = SubmissionStatus.PENDING
    priority: Optional[SubmissionPriority] = None
    assigned_to: Optional[str] = None

    # Notes
    internal_notes: Optional[str] = None
    client_notes: Optional[str] = None

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def _tag_payload(cls, data: Any) -> Any:
        return _tag_service_specific_data(data)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        return str(value) if value is not None else None

    @model_validator(mode="after")
    def _payload_matches_service(self) -> "OnboardingSubmission":
        _check_tag_agreement(self.service_type, self.service_specific_data)
        return self


# ─── Requests / responses ───────────────────────────────────────────


class OnboardingSubmissionCreateRequest(CamelModel):
    """Payload for creating a submission (server-assigned fields excluded)."""

    project_name: str
    company_name: Optional[str] = None
    industry: Optional[str] = None
    description: Optional[str] = None

    name: str
    email: str
    phone: Optional[str] = None
    preferred_contact: Optional[str] = None

    service_type: ServiceType
    budget: Optional[str] = None
    timeline: Optional[str] = None
    urgency: Optional[str] = None
    service_specific_data: Optional[ServiceSpecificData] = None

    additional_requirements: Optional[str] = None
    inspiration: Optional[str] = None
    add_ons: Optional[list[str]] = None

    @model_validator(mode="before")
    @classmethod
    def _tag_payload(cls, data: Any) -> Any:
        return _tag_service_specific_data(data)

    @field_validator("add_ons")
    @classmethod
    def _dedupe_add_ons(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        return _unique(value)

    @model_validator(mode="after")
    def _payload_matches_service(self) -> "OnboardingSubmissionCreateRequest":
        _check_tag_agreement(self.service_type, self.service_specific_data)
        return self


class OnboardingSubmissionUpdateRequest(CamelModel):
    """Partial update. Validate with ``context={"service_type": ...}``
    carrying the stored submission's service type so the payload can be
    tagged and a service type change rejected.
    """

    project_name: Optional[str] = None
    company_name: Optional[str] = None
    industry: Optional[str] = None
    description: Optional[str] = None

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    preferred_contact: Optional[str] = None

    service_type: Optional[ServiceType] = None
    budget: Optional[str] = None
    timeline: Optional[str] = None
    urgency: Optional[str] = None
    service_specific_data: Optional[ServiceSpecificData] = None

    additional_requirements: Optional[str] = None
    inspiration: Optional[str] = None
    add_ons: Optional[list[str]] = None

    # Workflow management
    status: Optional[SubmissionStatus] = None
    priority: Optional[SubmissionPriority] = None
    assigned_to: Optional[str] = None
    internal_notes: Optional[str] = None
    client_notes: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _tag_payload(cls, data: Any, info: ValidationInfo) -> Any:
        stored = (info.context or {}).get("service_type")
        return _tag_service_specific_data(data, fallback=stored)

    @field_validator("project_name", "name", "email", "service_type")
    @classmethod
    def _required_not_null(cls, value: Any) -> Any:
        # Omit the field to leave it unchanged; null would clear a required column
        if value is None:
            raise ValueError("must not be null")
        return value

    @field_validator("add_ons")
    @classmethod
    def _dedupe_add_ons(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        return _unique(value)

    @model_validator(mode="after")
    def _service_type_is_immutable(
        self, info: ValidationInfo
    ) -> "OnboardingSubmissionUpdateRequest":
        stored = (info.context or {}).get("service_type")
        if (
            stored is not None
            and self.service_type is not None
            and _tag_value(self.service_type) != _tag_value(stored)
        ):
            raise ValueError("serviceType cannot be changed after creation")
        _check_tag_agreement(self.service_type or stored, self.service_specific_data)
        return self


class OnboardingSubmissionListResponse(CamelModel):
    submissions: list[OnboardingSubmission] = []
    total: int = 0
    page: int = 1
    limit: int = 20
    total_pages: int = 1

    @classmethod
    def build(
        cls,
        submissions: list[OnboardingSubmission],
        total: int,
        page: int,
        limit: int,
    ) -> "OnboardingSubmissionListResponse":
        return cls(
            submissions=submissions,
            total=total,
            page=page,
            limit=limit,
            total_pages=max(1, math.ceil(total / limit)),
        )


class OnboardingSubmissionFilters(CamelModel):
    """Optional predicates for listing submissions; all given ones must hold."""

    service_type: Optional[ServiceType] = None
    status: Optional[SubmissionStatus] = None
    priority: Optional[SubmissionPriority] = None
    assigned_to: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    search: Optional[str] = None  # project name, company name, email
