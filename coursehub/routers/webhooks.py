"""
FastAPI router for identity-provider webhooks.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, Request
from pydantic import ValidationError

from common.utils import success_response, InvalidInputException, UnauthorizedException
from coursehub.config import Settings
from coursehub.dependencies import get_user_service, get_settings
from coursehub.pipelines.provisioning import (
    verify_signature,
    handle_identity_event_pipeline,
)
from coursehub.schemas.webhooks import IdentityEvent
from coursehub.services.user.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/identity")
async def identity_webhook(
    request: Request,
    user_service: Annotated[UserService, Depends(get_user_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    x_webhook_signature: Annotated[Optional[str], Header()] = None,
):
    """Provision user records from signed identity-provider events."""
    body = await request.body()

    if not verify_signature(settings.IDENTITY_WEBHOOK_SECRET, body, x_webhook_signature):
        logger.warning("Rejected identity webhook with invalid signature")
        raise UnauthorizedException(message="Invalid webhook signature", code="INVALID_SIGNATURE")

    try:
        event = IdentityEvent.model_validate_json(body)
    except ValidationError:
        raise InvalidInputException(message="Invalid Details")

    await handle_identity_event_pipeline(user_service, event)
    return success_response()
