"""Tests for the Redis-backed wizard session manager."""

import pytest
from unittest.mock import AsyncMock

from src.config import settings
from src.onboarding.session import WizardSessionManager
from src.onboarding.store import OnboardingState


class TestWizardSessionManager:
    """Test session CRUD against a mocked Redis."""

    @pytest.mark.asyncio
    async def test_get_missing_session(self, wizard_sessions: WizardSessionManager, mock_redis):
        assert await wizard_sessions.get("tok") is None
        mock_redis.get.assert_awaited_once_with("wizard:tok")

    @pytest.mark.asyncio
    async def test_save_uses_ttl(self, wizard_sessions: WizardSessionManager, mock_redis):
        state = OnboardingState(is_modal_open=True, selected_service="landing_page", current_step=2)

        await wizard_sessions.save("tok", state)

        key, ttl, payload = mock_redis.setex.await_args.args
        assert key == "wizard:tok"
        assert ttl == settings.wizard_session_ttl_seconds
        assert OnboardingState.model_validate_json(payload) == state

    @pytest.mark.asyncio
    async def test_get_existing_session(self, wizard_sessions: WizardSessionManager, mock_redis):
        state = OnboardingState(
            is_modal_open=True,
            selected_service="basic_mobile_app",
            form_data={"platforms": ["ios"]},
            current_step=3,
        )
        mock_redis.get = AsyncMock(return_value=state.model_dump_json())

        assert await wizard_sessions.get("tok") == state

    @pytest.mark.asyncio
    async def test_delete(self, wizard_sessions: WizardSessionManager, mock_redis):
        await wizard_sessions.delete("tok")
        mock_redis.delete.assert_awaited_once_with("wizard:tok")

    @pytest.mark.asyncio
    async def test_roundtrip_with_fake_redis(self, fake_redis):
        sessions = WizardSessionManager(fake_redis)
        state = OnboardingState(is_modal_open=True, selected_service="web_app", form_data={"a": 1})

        await sessions.save("abc", state)
        assert await sessions.get("abc") == state

        await sessions.delete("abc")
        assert await sessions.get("abc") is None
