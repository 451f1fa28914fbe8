"""Wizard session manager — Redis CRUD for a visitor's onboarding state."""

from typing import Optional

import redis.asyncio as redis
import structlog

from src.config import settings
from src.onboarding.store import OnboardingState

logger = structlog.get_logger()


class WizardSessionManager:
    """Keeps one OnboardingState per visitor token in Redis with TTL."""

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client
        self.ttl = settings.wizard_session_ttl_seconds

    def _key(self, token: str) -> str:
        return f"wizard:{token}"

    async def get(self, token: str) -> Optional[OnboardingState]:
        """Get wizard state from Redis."""
        data = await self.redis.get(self._key(token))
        if data:
            return OnboardingState.model_validate_json(data)
        return None

    async def save(self, token: str, state: OnboardingState) -> None:
        """Save wizard state to Redis with TTL."""
        await self.redis.setex(
            self._key(token),
            self.ttl,
            state.model_dump_json(),
        )
        logger.debug(
            "wizard_session_saved",
            token=token[:8],
            service=state.selected_service,
            step=state.current_step,
        )

    async def delete(self, token: str) -> None:
        """Delete wizard state from Redis."""
        await self.redis.delete(self._key(token))
