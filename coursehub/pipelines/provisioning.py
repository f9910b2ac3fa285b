"""
User provisioning pipeline functions.

User records are created from identity-provider webhook events, some time
after the user first signs in.
"""

import hashlib
import hmac
import logging
from typing import Dict, Any, Optional

from common.utils.exceptions import InvalidInputException
from coursehub.schemas.webhooks import IdentityEvent
from coursehub.services.user.user_service import UserService

logger = logging.getLogger(__name__)

USER_UPSERT_EVENTS = ("user.created", "user.updated")
USER_DELETED_EVENT = "user.deleted"


def compute_signature(secret: str, body: bytes) -> str:
    """Hex HMAC-SHA256 of the raw request body."""
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def verify_signature(secret: Optional[str], body: bytes, signature: Optional[str]) -> bool:
    """Check the webhook signature header against the raw body."""
    if not secret or not signature:
        return False
    return hmac.compare_digest(compute_signature(secret, body), signature.strip().lower())


def _profile_from_event(data: Dict[str, Any]) -> Dict[str, Optional[str]]:
    """
    Read profile fields from an event payload.

    Accepts flat fields (email, name, imageUrl) as well as the nested
    email_addresses / first_name / last_name / image_url layout.
    """
    email = data.get("email")
    if not email:
        addresses = data.get("email_addresses") or []
        if addresses:
            email = addresses[0].get("email_address")

    name = data.get("name")
    if not name:
        parts = [data.get("first_name"), data.get("last_name")]
        name = " ".join(p for p in parts if p) or None

    return {
        "email": email,
        "name": name,
        "imageUrl": data.get("imageUrl") or data.get("image_url"),
    }


async def handle_identity_event_pipeline(
    user_service: UserService,
    event: IdentityEvent,
) -> Dict[str, Any]:
    """
    Apply a user lifecycle event to the user store.

    Args:
        user_service: For user persistence
        event: Verified webhook event

    Returns:
        Dict describing what was done
    """
    user_id = event.data.get("id")

    if event.type in USER_UPSERT_EVENTS:
        if not user_id:
            raise InvalidInputException(message="Invalid Details")

        profile = _profile_from_event(event.data)
        await user_service.upsert_from_identity(
            user_id=user_id,
            email=profile["email"],
            name=profile["name"],
            image_url=profile["imageUrl"],
        )
        return {"handled": True}

    if event.type == USER_DELETED_EVENT:
        logger.info(f"Ignoring user deletion event for {user_id}")
        return {"handled": False}

    logger.warning(f"Unknown identity event type: {event.type}")
    return {"handled": False}
