"""Onboarding state store — UI state of the onboarding wizard.

One store per visitor session. The five operations below are the only
mutation surface; all of them are total and never raise.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from src.schemas.onboarding import CamelModel


class OnboardingState(CamelModel):
    """Snapshot of the wizard state. Not persisted past the session."""

    is_modal_open: bool = False
    selected_service: str = ""
    form_data: dict[str, Any] = Field(default_factory=dict)
    current_step: int = 1


class OnboardingStore:
    """Mutable holder of an OnboardingState."""

    def __init__(self, state: OnboardingState | None = None):
        self._state = state.model_copy(deep=True) if state else OnboardingState()

    @classmethod
    def from_state(cls, state: OnboardingState) -> "OnboardingStore":
        return cls(state)

    # ─── Read access ─────────────────────────────────────────────────

    @property
    def is_modal_open(self) -> bool:
        return self._state.is_modal_open

    @property
    def selected_service(self) -> str:
        return self._state.selected_service

    @property
    def form_data(self) -> dict[str, Any]:
        return dict(self._state.form_data)

    @property
    def current_step(self) -> int:
        return self._state.current_step

    def snapshot(self) -> OnboardingState:
        return self._state.model_copy(deep=True)

    # ─── Mutations ───────────────────────────────────────────────────

    def open_modal(self, service: str) -> None:
        """Open the wizard for a service, discarding any previous progress."""
        self._state = OnboardingState(
            is_modal_open=True,
            selected_service=service,
            current_step=1,
            form_data={},
        )

    def close_modal(self) -> None:
        self._state = OnboardingState()

    def set_form_data(self, data: dict[str, Any]) -> None:
        """Shallow-merge ``data`` into the accumulator; last write wins per key."""
        merged = {**self._state.form_data, **data}
        self._state = self._state.model_copy(update={"form_data": merged})

    def set_current_step(self, step: int) -> None:
        # No bounds check here; the wizard controller owns the step range.
        self._state = self._state.model_copy(update={"current_step": step})

    def reset(self) -> None:
        self.close_modal()
