"""Landing page onboarding wizard routes.

Each visitor gets a ``wizard_token`` cookie; their wizard state lives in
Redis between requests and is dropped on close or after submitting.
"""

import secrets
from typing import Any, Optional

import redis.asyncio as redis
import structlog
from fastapi import APIRouter, Body, Cookie, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.responses import api_response
from src.clients.submission_api import SubmissionApiClient, get_submission_api
from src.config import settings
from src.database import get_db
from src.exceptions import UnknownServiceError, WizardStepError
from src.onboarding.branching import SERVICE_CATALOGUE
from src.onboarding.forms import TOTAL_STEPS
from src.onboarding.gateway import SubmissionGateway
from src.onboarding.session import WizardSessionManager
from src.onboarding.store import OnboardingStore
from src.onboarding.wizard import OnboardingWizard, WizardResult, reference_code
from src.redis_client import get_redis
from src.repositories.submission import SubmissionRepository

logger = structlog.get_logger()

router = APIRouter(prefix="/api/onboarding", tags=["onboarding-wizard"])

WIZARD_COOKIE = "wizard_token"


class OpenIn(BaseModel):
    service: str


class StepIn(BaseModel):
    step: int


def _serialize(wizard: OnboardingWizard, result: WizardResult) -> dict:
    data: dict[str, Any] = {
        "state": result.state.model_dump(mode="json", by_alias=True),
        "totalSteps": TOTAL_STEPS,
        "progress": wizard.progress,
        "errors": [e.model_dump() for e in result.errors],
    }
    if result.submission is not None:
        data["submission"] = result.submission.model_dump(mode="json", by_alias=True)
        if result.submission.id:
            data["reference"] = reference_code(result.submission.id)
    return data


class WizardContext:
    """Loads a visitor's store for one request and writes it back."""

    def __init__(self, token: str, sessions: WizardSessionManager, is_new: bool):
        self.token = token
        self.sessions = sessions
        self.is_new = is_new
        self.store = OnboardingStore()

    async def load(self) -> None:
        state = await self.sessions.get(self.token)
        if state is not None:
            self.store = OnboardingStore.from_state(state)

    async def persist(self) -> None:
        if self.store.is_modal_open:
            await self.sessions.save(self.token, self.store.snapshot())
        else:
            await self.sessions.delete(self.token)

    def respond(self, wizard: OnboardingWizard, result: WizardResult, status_code: int = 200):
        response = api_response(_serialize(wizard, result), status_code=status_code)
        if self.is_new:
            response.set_cookie(
                key=WIZARD_COOKIE,
                value=self.token,
                httponly=True,
                secure=settings.cookie_secure,
                samesite="lax",
                max_age=settings.wizard_session_ttl_seconds,
            )
        return response


async def get_wizard_context(
    wizard_token: Optional[str] = Cookie(None),
    redis_client: redis.Redis = Depends(get_redis),
) -> WizardContext:
    is_new = not wizard_token
    ctx = WizardContext(
        token=wizard_token or secrets.token_urlsafe(24),
        sessions=WizardSessionManager(redis_client),
        is_new=is_new,
    )
    if not is_new:
        await ctx.load()
    return ctx


@router.get("/services")
async def list_services():
    """Service packages the wizard can be opened for."""
    return api_response([
        {
            "key": o.key,
            "name": o.name,
            "serviceType": o.service_type.value,
            "price": o.price,
            "timeline": o.timeline,
            "description": o.description,
        }
        for o in SERVICE_CATALOGUE.values()
    ])


@router.get("/wizard")
async def get_wizard(ctx: WizardContext = Depends(get_wizard_context)):
    wizard = OnboardingWizard(ctx.store)
    return ctx.respond(wizard, WizardResult(state=ctx.store.snapshot()))


@router.post("/wizard/open")
async def open_wizard(
    data: OpenIn,
    ctx: WizardContext = Depends(get_wizard_context),
):
    wizard = OnboardingWizard(ctx.store)
    try:
        result = wizard.open(data.service)
    except UnknownServiceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    await ctx.persist()
    return ctx.respond(wizard, result)


@router.post("/wizard/form-data")
async def update_form_data(
    data: dict = Body(...),
    ctx: WizardContext = Depends(get_wizard_context),
):
    wizard = OnboardingWizard(ctx.store)
    try:
        result = wizard.update(data)
    except WizardStepError as e:
        raise HTTPException(status_code=409, detail=str(e))
    await ctx.persist()
    return ctx.respond(wizard, result)


@router.post("/wizard/step")
async def set_step(
    data: StepIn,
    ctx: WizardContext = Depends(get_wizard_context),
):
    wizard = OnboardingWizard(ctx.store)
    try:
        result = wizard.go_to(data.step)
    except WizardStepError as e:
        raise HTTPException(status_code=409, detail=str(e))
    await ctx.persist()
    return ctx.respond(wizard, result)


@router.post("/wizard/next")
async def next_step(
    data: Optional[dict] = Body(None),
    ctx: WizardContext = Depends(get_wizard_context),
):
    wizard = OnboardingWizard(ctx.store)
    try:
        result = wizard.next(data or {})
    except WizardStepError as e:
        raise HTTPException(status_code=409, detail=str(e))
    await ctx.persist()
    return ctx.respond(wizard, result, status_code=200 if result.ok else 422)


@router.post("/wizard/back")
async def previous_step(ctx: WizardContext = Depends(get_wizard_context)):
    wizard = OnboardingWizard(ctx.store)
    try:
        result = wizard.back()
    except WizardStepError as e:
        raise HTTPException(status_code=409, detail=str(e))
    await ctx.persist()
    return ctx.respond(wizard, result)


@router.post("/wizard/close")
async def close_wizard(ctx: WizardContext = Depends(get_wizard_context)):
    wizard = OnboardingWizard(ctx.store)
    result = wizard.close()
    await ctx.persist()
    return ctx.respond(wizard, result)


@router.post("/wizard/submit")
async def submit_wizard(
    data: Optional[dict] = Body(None),
    ctx: WizardContext = Depends(get_wizard_context),
    db: AsyncSession = Depends(get_db),
    api: SubmissionApiClient = Depends(get_submission_api),
):
    gateway = SubmissionGateway(api, SubmissionRepository(db))
    wizard = OnboardingWizard(ctx.store, gateway)
    try:
        result = await wizard.submit(data or {})
    except WizardStepError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not result.ok:
        await ctx.persist()
        return ctx.respond(wizard, result, status_code=422)

    # The accumulator is discarded once the submission is handed off
    await ctx.sessions.delete(ctx.token)
    logger.info("wizard_session_discarded", token=ctx.token[:8])
    return ctx.respond(wizard, result)
