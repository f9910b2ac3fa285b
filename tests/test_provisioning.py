"""Tests for identity webhook signature checks and user provisioning."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from common.utils.exceptions import InvalidInputException
from coursehub.pipelines.provisioning import (
    compute_signature,
    verify_signature,
    handle_identity_event_pipeline,
)
from coursehub.schemas.webhooks import IdentityEvent


SECRET = "whsec_test"


class TestVerifySignature:
    def test_valid(self):
        body = b'{"type":"user.created","data":{"id":"u1"}}'
        assert verify_signature(SECRET, body, compute_signature(SECRET, body)) is True

    def test_tampered_body(self):
        signature = compute_signature(SECRET, b'{"a":1}')
        assert verify_signature(SECRET, b'{"a":2}', signature) is False

    def test_missing_signature_or_secret(self):
        body = b"{}"
        assert verify_signature(SECRET, body, None) is False
        assert verify_signature(None, body, compute_signature(SECRET, body)) is False


@pytest.fixture
def user_service():
    service = MagicMock()
    service.upsert_from_identity = AsyncMock()
    return service


class TestHandleIdentityEvent:
    @pytest.mark.asyncio
    async def test_created_with_flat_fields(self, user_service):
        event = IdentityEvent(type="user.created", data={
            "id": "u1", "email": "a@example.com", "name": "Ada", "imageUrl": "https://img/a.png",
        })

        result = await handle_identity_event_pipeline(user_service, event)

        assert result["handled"] is True
        user_service.upsert_from_identity.assert_called_once_with(
            user_id="u1", email="a@example.com", name="Ada", image_url="https://img/a.png",
        )

    @pytest.mark.asyncio
    async def test_updated_with_nested_fields(self, user_service):
        event = IdentityEvent(type="user.updated", data={
            "id": "u1",
            "email_addresses": [{"email_address": "b@example.com"}],
            "first_name": "Bo",
            "last_name": "Lind",
            "image_url": "https://img/b.png",
        })

        await handle_identity_event_pipeline(user_service, event)

        user_service.upsert_from_identity.assert_called_once_with(
            user_id="u1", email="b@example.com", name="Bo Lind", image_url="https://img/b.png",
        )

    @pytest.mark.asyncio
    async def test_deleted_is_ignored(self, user_service):
        event = IdentityEvent(type="user.deleted", data={"id": "u1"})

        result = await handle_identity_event_pipeline(user_service, event)

        assert result["handled"] is False
        user_service.upsert_from_identity.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_user_id(self, user_service):
        event = IdentityEvent(type="user.created", data={"email": "x@example.com"})

        with pytest.raises(InvalidInputException):
            await handle_identity_event_pipeline(user_service, event)
