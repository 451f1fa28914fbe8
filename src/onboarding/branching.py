"""Service catalogue and service-specific branching.

Maps the service picked on the landing page to its service type, picks the
matching service-specific data shape, and assembles the accumulated wizard
data into a creation request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import structlog

from src.exceptions import UnknownServiceError
from src.onboarding.store import OnboardingState
from src.schemas.onboarding import (
    CamelModel,
    LandingPageData,
    MobileAppData,
    OnboardingSubmissionCreateRequest,
    ServiceType,
    WebAppData,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class ServiceOffering:
    """One package shown on the pricing section."""

    key: str
    name: str
    service_type: ServiceType
    price: str
    timeline: str
    description: str


SERVICE_CATALOGUE: dict[str, ServiceOffering] = {
    offering.key: offering
    for offering in (
        ServiceOffering(
            key="landing_page",
            name="Landing Page",
            service_type=ServiceType.LANDING_PAGE,
            price="₱8,000 - ₱12,000",
            timeline="48 hours",
            description="Professional single-page website with AI chat widget",
        ),
        ServiceOffering(
            key="basic_website",
            name="Basic Website",
            service_type=ServiceType.WEB_APP,
            price="₱18,000 - ₱25,000",
            timeline="5-7 days",
            description="3-5 page website with AI features and SEO optimization",
        ),
        ServiceOffering(
            key="advanced_website",
            name="Advanced Website",
            service_type=ServiceType.WEB_APP,
            price="₱40,000 - ₱60,000",
            timeline="2-3 weeks",
            description="Full-featured website with CMS and advanced functionality",
        ),
        ServiceOffering(
            key="basic_mobile_app",
            name="Basic Mobile App",
            service_type=ServiceType.MOBILE_APP,
            price="₱80,000 - ₱120,000",
            timeline="4-6 weeks",
            description="Cross-platform mobile app with basic features",
        ),
        ServiceOffering(
            key="advanced_mobile_app",
            name="Advanced Mobile App",
            service_type=ServiceType.MOBILE_APP,
            price="₱150,000 - ₱250,000",
            timeline="8-12 weeks",
            description="Feature-rich mobile app with backend integration",
        ),
    )
}

SERVICE_DATA_MODELS: dict[ServiceType, type[CamelModel]] = {
    ServiceType.LANDING_PAGE: LandingPageData,
    ServiceType.WEB_APP: WebAppData,
    ServiceType.MOBILE_APP: MobileAppData,
}

DEFAULT_URGENCY = "medium"
DEFAULT_PREFERRED_CONTACT = "email"


def get_offering(selected_service: str) -> Optional[ServiceOffering]:
    return SERVICE_CATALOGUE.get(selected_service)


def resolve_service_type(selected_service: str) -> ServiceType:
    """Map a catalogue key (or a raw service type) to its ServiceType."""
    offering = get_offering(selected_service)
    if offering is not None:
        return offering.service_type
    try:
        return ServiceType(selected_service)
    except ValueError:
        raise UnknownServiceError(selected_service) from None


def service_data_model(service_type: ServiceType) -> type[CamelModel]:
    return SERVICE_DATA_MODELS[service_type]


def _field_keys(model: type[CamelModel]) -> dict[str, str]:
    """camelCase alias → attribute name for every field except the tag."""
    keys = {}
    for name, info in model.model_fields.items():
        if name == "service_type":
            continue
        keys[info.alias or name] = name
    return keys


def build_service_specific_data(
    service_type: ServiceType,
    form_data: dict[str, Any],
    original_service: Optional[str] = None,
) -> CamelModel:
    """Build the union member for ``service_type`` from the accumulator.

    Only keys that belong to that member are read; keys left behind by
    another service are ignored.
    """
    model = service_data_model(service_type)
    keys = _field_keys(model)
    values = {keys[k]: v for k, v in form_data.items() if k in keys}
    if original_service is not None:
        values["original_service"] = original_service
    return model(**values)


def build_create_request(state: OnboardingState) -> OnboardingSubmissionCreateRequest:
    """Assemble the accumulated wizard data into a creation request.

    The service type is taken from the service selected at assembly time.
    Raises pydantic.ValidationError when required fields are missing.
    """
    selected = state.selected_service
    service_type = resolve_service_type(selected)
    offering = get_offering(selected)
    data = state.form_data

    company_name = data.get("companyName")
    description = data.get("projectDescription", data.get("description"))

    request = OnboardingSubmissionCreateRequest(
        project_name=data.get("projectName"),
        company_name=company_name,
        industry=data.get("industry"),
        description=description,
        name=data.get("name") or company_name,
        email=data.get("contactEmail", data.get("email")),
        phone=data.get("contactPhone", data.get("phone")),
        preferred_contact=data.get("preferredContact") or DEFAULT_PREFERRED_CONTACT,
        service_type=service_type,
        budget=data.get("budget") or (offering.price if offering else None),
        timeline=data.get("timeline") or (offering.timeline if offering else None),
        urgency=data.get("urgency") or DEFAULT_URGENCY,
        service_specific_data=build_service_specific_data(
            service_type, data, original_service=selected
        ),
        additional_requirements=data.get("additionalRequirements", description),
        inspiration=data.get("inspiration"),
        add_ons=list(data.get("addOns") or []),
    )

    logger.debug(
        "create_request_assembled",
        service=selected,
        service_type=service_type.value,
        fields=len(data),
    )
    return request
