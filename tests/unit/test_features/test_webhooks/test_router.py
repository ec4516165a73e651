"""Tests for the webhooks router."""

from __future__ import annotations

from uuid import uuid4

import pytest

from notification_service.features.webhooks.models import WebhookDelivery
from notification_service.features.webhooks.router import router

CREATE_BODY = {
    "url": "https://hooks.example.com/events",
    "secret": "s3cret",
    "events": ["task_assigned", "comment_added"],
}


@pytest.fixture
def client(make_client):
    return make_client(router)


async def test_create_returns_webhook_without_secret(client, user_headers) -> None:
    async with client:
        response = await client.post("/webhooks", json=CREATE_BODY, headers=user_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["user_id"] == "user-1"
    assert body["events"] == ["task_assigned", "comment_added"]
    assert body["active"] is True
    assert "secret" not in body
    assert "s3cret" not in response.text


@pytest.mark.parametrize(
    "overrides",
    [{"events": []}, {"events": ["mentioned"]}, {"url": "not-a-url"}],
)
async def test_invalid_create_is_rejected_before_persisting(
    client, user_headers, overrides
) -> None:
    async with client:
        response = await client.post(
            "/webhooks", json={**CREATE_BODY, **overrides}, headers=user_headers
        )
        listing = await client.get("/webhooks", headers=user_headers)

    assert response.status_code == 422
    assert response.json()["errors"]
    assert listing.json() == []


async def test_private_target_is_rejected(client, user_headers) -> None:
    async with client:
        response = await client.post(
            "/webhooks",
            json={**CREATE_BODY, "url": "http://127.0.0.1/hook"},
            headers=user_headers,
        )

    assert response.status_code == 422
    assert response.json()["field"] == "url"


async def test_crud_round(client, user_headers) -> None:
    async with client:
        created = (await client.post("/webhooks", json=CREATE_BODY, headers=user_headers)).json()
        webhook_id = created["id"]

        fetched = await client.get(f"/webhooks/{webhook_id}", headers=user_headers)
        assert fetched.status_code == 200
        assert fetched.json()["url"] == created["url"]

        patched = await client.patch(
            f"/webhooks/{webhook_id}", json={"active": False}, headers=user_headers
        )
        assert patched.status_code == 200
        assert patched.json()["active"] is False
        assert patched.json()["events"] == created["events"]

        deleted = await client.delete(f"/webhooks/{webhook_id}", headers=user_headers)
        assert deleted.json() == {"deleted": True}

        gone = await client.get(f"/webhooks/{webhook_id}", headers=user_headers)
        assert gone.status_code == 404


async def test_patch_rejects_unknown_fields(client, user_headers, make_webhook) -> None:
    mine = await make_webhook()
    async with client:
        response = await client.patch(
            f"/webhooks/{mine.id}", json={"user_id": "user-2"}, headers=user_headers
        )

    assert response.status_code == 422


async def test_other_users_webhook_is_not_found(client, make_webhook) -> None:
    theirs = await make_webhook("user-2")
    headers = {"X-User-Id": "user-1"}

    async with client:
        responses = [
            await client.get(f"/webhooks/{theirs.id}", headers=headers),
            await client.patch(f"/webhooks/{theirs.id}", json={"active": False}, headers=headers),
            await client.delete(f"/webhooks/{theirs.id}", headers=headers),
        ]
        missing = await client.get(f"/webhooks/{uuid4()}", headers=headers)
        deliveries = await client.get(f"/webhooks/{theirs.id}/deliveries", headers=headers)

    for response in responses:
        assert response.status_code == 404
        assert response.json()["type"] == "webhook-not-found"
        assert response.json()["detail"] == missing.json()["detail"]
    assert deliveries.status_code == 200
    assert deliveries.json() == []


async def test_malformed_id_is_not_found(client, user_headers) -> None:
    async with client:
        responses = [
            await client.get("/webhooks/not-a-uuid", headers=user_headers),
            await client.patch("/webhooks/not-a-uuid", json={"active": False}, headers=user_headers),
            await client.delete("/webhooks/not-a-uuid", headers=user_headers),
        ]
        deliveries = await client.get("/webhooks/not-a-uuid/deliveries", headers=user_headers)

    for response in responses:
        assert response.status_code == 404
        assert response.json()["type"] == "webhook-not-found"
    assert deliveries.status_code == 200
    assert deliveries.json() == []


async def test_deliveries_listing(client, make_webhook, session_factory, user_headers) -> None:
    mine = await make_webhook()
    async with session_factory() as session:
        session.add(
            WebhookDelivery(
                webhook_id=mine.id,
                event_type="task_assigned",
                payload='{"event":"task_assigned","title":"Hi"}',
                status="delivered",
                attempts=2,
                response_code=200,
            )
        )
        await session.commit()

    async with client:
        response = await client.get(f"/webhooks/{mine.id}/deliveries", headers=user_headers)

    (delivery,) = response.json()
    assert delivery["status"] == "delivered"
    assert delivery["attempts"] == 2
    assert delivery["payload"] == {"event": "task_assigned", "title": "Hi"}


async def test_requires_user_identity(client) -> None:
    async with client:
        response = await client.get("/webhooks")

    assert response.status_code == 401
