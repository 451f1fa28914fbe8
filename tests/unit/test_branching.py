"""Tests for service branching and create-request assembly."""

import pytest
from pydantic import ValidationError

from src.exceptions import UnknownServiceError
from src.onboarding.branching import (
    SERVICE_CATALOGUE,
    build_create_request,
    build_service_specific_data,
    resolve_service_type,
    service_data_model,
)
from src.onboarding.store import OnboardingStore
from src.schemas.onboarding import (
    LandingPageData,
    MobileAppData,
    Platform,
    ServiceType,
    WebAppData,
)


class TestServiceResolution:
    @pytest.mark.parametrize(
        "service, expected",
        [
            ("landing_page", ServiceType.LANDING_PAGE),
            ("basic_website", ServiceType.WEB_APP),
            ("advanced_website", ServiceType.WEB_APP),
            ("basic_mobile_app", ServiceType.MOBILE_APP),
            ("advanced_mobile_app", ServiceType.MOBILE_APP),
            ("web_app", ServiceType.WEB_APP),
            ("mobile_app", ServiceType.MOBILE_APP),
        ],
    )
    def test_resolve_service_type(self, service, expected):
        assert resolve_service_type(service) == expected

    @pytest.mark.parametrize("service", ["", "desktop_app", "LANDING_PAGE"])
    def test_unknown_service(self, service):
        with pytest.raises(UnknownServiceError):
            resolve_service_type(service)

    def test_every_service_type_has_a_data_model(self):
        assert service_data_model(ServiceType.LANDING_PAGE) is LandingPageData
        assert service_data_model(ServiceType.WEB_APP) is WebAppData
        assert service_data_model(ServiceType.MOBILE_APP) is MobileAppData

    def test_catalogue_entries_have_pricing(self):
        for offering in SERVICE_CATALOGUE.values():
            assert offering.price
            assert offering.timeline


class TestServiceSpecificData:
    def test_picks_only_keys_of_the_variant(self):
        form_data = {
            "projectName": "X",
            "appType": "SaaS",
            "coreFeatures": ["auth"],
            "pageType": "launch",  # landing page key
        }

        data = build_service_specific_data(ServiceType.WEB_APP, form_data)

        assert isinstance(data, WebAppData)
        assert data.service_type == "web_app"
        assert data.app_type == "SaaS"
        assert data.core_features == ["auth"]
        assert "pageType" not in data.model_dump(by_alias=True)

    def test_mobile_platforms_are_typed(self):
        data = build_service_specific_data(
            ServiceType.MOBILE_APP, {"platforms": ["ios", "android"]}
        )
        assert data.platforms == [Platform.IOS, Platform.ANDROID]

    def test_original_service_is_recorded(self):
        data = build_service_specific_data(
            ServiceType.WEB_APP, {}, original_service="advanced_website"
        )
        assert data.original_service == "advanced_website"


class TestBuildCreateRequest:
    def _store(self, service: str, *partials: dict) -> OnboardingStore:
        store = OnboardingStore()
        store.open_modal(service)
        for partial in partials:
            store.set_form_data(partial)
        return store

    def test_maps_wizard_fields(self, basic_info, web_app_requirements):
        store = self._store("basic_website", basic_info, web_app_requirements)

        request = build_create_request(store.snapshot())

        assert request.project_name == "Bakery Relaunch"
        assert request.company_name == "Sunrise Bakery"
        assert request.description == basic_info["projectDescription"]
        assert request.additional_requirements == basic_info["projectDescription"]
        assert request.email == "owner@sunrise.example"
        assert request.phone == "+63 917 555 0101"
        assert request.name == "Sunrise Bakery"  # falls back to company name
        assert request.preferred_contact == "email"
        assert request.urgency == "medium"
        assert request.add_ons == []
        assert request.service_type == ServiceType.WEB_APP

    def test_budget_and_timeline_from_catalogue(self, basic_info):
        store = self._store("basic_mobile_app", basic_info)

        request = build_create_request(store.snapshot())

        offering = SERVICE_CATALOGUE["basic_mobile_app"]
        assert request.budget == offering.price
        assert request.timeline == offering.timeline

    def test_explicit_budget_wins(self, basic_info):
        store = self._store("landing_page", basic_info, {"budget": "₱10,000", "urgency": "high"})

        request = build_create_request(store.snapshot())

        assert request.budget == "₱10,000"
        assert request.urgency == "high"

    def test_service_specific_payload_matches_service(self, basic_info, landing_requirements):
        store = self._store("landing_page", basic_info, landing_requirements)

        request = build_create_request(store.snapshot())

        data = request.service_specific_data
        assert isinstance(data, LandingPageData)
        assert data.sections == ["hero", "menu", "contact"]
        assert data.cta_goal == "book a table"
        assert data.original_service == "landing_page"

    def test_missing_required_fields_raise(self):
        store = self._store("landing_page", {"companyName": "Only Company"})

        with pytest.raises(ValidationError):
            build_create_request(store.snapshot())

    def test_switching_service_without_reset(
        self, basic_info, landing_requirements, mobile_requirements
    ):
        """Stale keys stay in the accumulator but not in the new payload."""
        store = self._store("landing_page", basic_info, landing_requirements)

        # Service changes mid-wizard without reset/open_modal
        state = store.snapshot().model_copy(update={"selected_service": "basic_mobile_app"})
        store = OnboardingStore.from_state(state)
        store.set_form_data(mobile_requirements)

        assert "pageType" in store.form_data  # unguarded accumulator

        request = build_create_request(store.snapshot())

        assert request.service_type == ServiceType.MOBILE_APP
        assert isinstance(request.service_specific_data, MobileAppData)
        payload = request.service_specific_data.model_dump(by_alias=True)
        assert "pageType" not in payload
        assert "sections" not in payload
        assert payload["appCategory"] == "fitness"
