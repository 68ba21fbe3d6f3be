"""Tests for SMS templates, the gateway client and the dispatcher."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from app.services.notification_dispatcher import (
    NotificationDispatcher,
    SmsGatewayClient,
    mask_phone,
)
from app.services.sms_templates import DeliveryOutcome, NotificationEvent, TemplateKind, render

BASE_URL = "https://sms.example.test"
PAYLOAD = {"applicant_name": "Juan Dela Cruz", "job_title": "Cashier", "company": "Pili Mart"}


def make_gateway(handler=None, **kwargs) -> SmsGatewayClient:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler)) if handler else None
    params = {"base_url": BASE_URL, "device_id": "device-1", "api_key": "key-1"}
    params.update(kwargs)
    return SmsGatewayClient(client=client, **params)


def make_event(**overrides) -> NotificationEvent:
    params = {
        "recipient_phone": "09171234567",
        "template_kind": TemplateKind.APPLICATION_RECEIVED,
        "payload": dict(PAYLOAD),
    }
    params.update(overrides)
    return NotificationEvent(**params)


def test_render_status_update():
    text = render(TemplateKind.STATUS_UPDATE, {**PAYLOAD, "status": "hired"})
    assert text == "Hi Juan Dela Cruz! Congratulations! You have been hired for Cashier at Pili Mart."


def test_render_status_update_unknown_status():
    text = render(TemplateKind.STATUS_UPDATE, {**PAYLOAD, "status": "on_hold"})
    assert "Your application status has been updated to: on_hold" in text


def test_render_interview_with_notes():
    text = render(
        TemplateKind.INTERVIEW_SCHEDULED,
        {
            **PAYLOAD,
            "interview_date": "Monday, March 02, 2026",
            "interview_time": "10:00 AM",
            "interview_venue": "Naga City branch",
            "interview_type": "in-person",
            "interview_notes": "Bring a valid ID",
        },
    )
    assert "Date: Monday, March 02, 2026" in text
    assert "Type: In-Person" in text
    assert "Venue/Link: Naga City branch Notes: Bring a valid ID" in text


def test_render_not_proceeding_includes_reason():
    text = render(TemplateKind.NOT_PROCEEDING, {**PAYLOAD, "reason": "Position filled"})
    assert "Reason: Position filled" in text


def test_render_missing_field():
    with pytest.raises(KeyError):
        render(TemplateKind.NOT_PROCEEDING, PAYLOAD)


def test_mask_phone():
    assert mask_phone("09171234567") == "***4567"
    assert mask_phone(None) == ""


@pytest.mark.asyncio
async def test_send_sms_request_shape():
    """Test gateway request URL, headers and body."""
    gateway = SmsGatewayClient(base_url=BASE_URL + "/", device_id="device-1", api_key="key-1")

    with patch.object(gateway.client, "post", new_callable=AsyncMock) as mock_post:
        mock_response = AsyncMock()
        mock_response.status_code = 200
        mock_response.json = MagicMock(return_value={"data": {"success": True}})
        mock_response.raise_for_status = MagicMock()
        mock_post.return_value = mock_response

        result = await gateway.send_sms("09171234567", "hello")

        assert result == {"data": {"success": True}}
        mock_post.assert_called_once()
        call_args = mock_post.call_args
        assert call_args[0][0] == f"{BASE_URL}/api/v1/gateway/devices/device-1/send-sms"
        assert call_args[1]["headers"]["x-api-key"] == "key-1"
        assert call_args[1]["json"] == {"recipients": ["09171234567"], "message": "hello"}

    await gateway.close()


@pytest.mark.asyncio
async def test_unconfigured_gateway_fails_without_io():
    gateway = make_gateway(api_key="")
    dispatcher = NotificationDispatcher(gateway, timeout=1.0)

    with patch.object(gateway.client, "post", new_callable=AsyncMock) as mock_post:
        outcome = await dispatcher.notify(make_event())

        assert outcome is DeliveryOutcome.FAILED
        mock_post.assert_not_called()

    await dispatcher.close()


@pytest.mark.asyncio
async def test_missing_phone_fails_without_io():
    gateway = make_gateway()
    dispatcher = NotificationDispatcher(gateway, timeout=1.0)

    with patch.object(gateway.client, "post", new_callable=AsyncMock) as mock_post:
        event = make_event(recipient_phone=None)
        assert await dispatcher.notify(event) is DeliveryOutcome.FAILED
        assert event.outcome is DeliveryOutcome.FAILED
        mock_post.assert_not_called()

    await dispatcher.close()


@pytest.mark.asyncio
async def test_delivered():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(201, json={"data": {"smsBatchId": "b-1"}})

    dispatcher = NotificationDispatcher(make_gateway(handler), timeout=1.0)
    event = make_event()

    assert await dispatcher.notify(event) is DeliveryOutcome.DELIVERED
    assert len(requests) == 1
    body = json.loads(requests[0].content)
    assert body["recipients"] == ["09171234567"]
    assert "Cashier at Pili Mart" in body["message"]

    await dispatcher.close()


@pytest.mark.asyncio
async def test_non_2xx_fails_without_retry():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500, json={"error": "boom"})

    dispatcher = NotificationDispatcher(make_gateway(handler), timeout=1.0)

    assert await dispatcher.notify(make_event()) is DeliveryOutcome.FAILED
    assert len(calls) == 1

    await dispatcher.close()


@pytest.mark.asyncio
async def test_malformed_reply_fails():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>not json</html>")

    dispatcher = NotificationDispatcher(make_gateway(handler), timeout=1.0)
    assert await dispatcher.notify(make_event()) is DeliveryOutcome.FAILED
    await dispatcher.close()


@pytest.mark.asyncio
async def test_timeout_fails():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1)
        return httpx.Response(200, json={})

    dispatcher = NotificationDispatcher(make_gateway(handler), timeout=0.05)
    assert await dispatcher.notify(make_event()) is DeliveryOutcome.FAILED
    await dispatcher.close()


@pytest.mark.asyncio
async def test_connect_error_is_retried_once():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"data": {}})

    dispatcher = NotificationDispatcher(make_gateway(handler), timeout=5.0)

    assert await dispatcher.notify(make_event()) is DeliveryOutcome.DELIVERED
    assert len(calls) == 2

    await dispatcher.close()


@pytest.mark.asyncio
async def test_dispatch_and_report():
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if body["recipients"] == ["09990000000"]:
            return httpx.Response(503)
        return httpx.Response(200, json={})

    dispatcher = NotificationDispatcher(make_gateway(handler), timeout=1.0)

    assert await dispatcher.dispatch_and_report([]) == "skipped"
    assert await dispatcher.dispatch_and_report([make_event()]) == "delivered"
    assert (
        await dispatcher.dispatch_and_report([make_event(), make_event(recipient_phone="09990000000")])
        == "failed"
    )

    await dispatcher.close()


@pytest.mark.asyncio
async def test_delivery_survives_caller_cancellation():
    async def slow_handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0.2)
        return httpx.Response(200, json={"data": {}})

    dispatcher = NotificationDispatcher(make_gateway(slow_handler), timeout=5.0)
    event = make_event()

    caller = asyncio.create_task(dispatcher.dispatch_and_report([event]))
    await asyncio.sleep(0.05)
    caller.cancel()
    with pytest.raises(asyncio.CancelledError):
        await caller
    assert event.outcome is None

    # close waits for the in-flight delivery
    await dispatcher.close()
    assert event.outcome is DeliveryOutcome.DELIVERED


def test_render_employer_verification():
    approved = render(TemplateKind.EMPLOYER_VERIFIED, {"employer_name": "Elena Bautista"})
    assert approved.startswith("Hi Elena Bautista! Great news!")
    assert "Welcome aboard!" in approved

    rejected = render(
        TemplateKind.EMPLOYER_REJECTED, {"employer_name": "Elena Bautista", "reason": "Permit expired"}
    )
    assert "was not approved. Reason: Permit expired. Please contact support" in rejected

    no_reason = render(TemplateKind.EMPLOYER_REJECTED, {"employer_name": "Elena Bautista", "reason": None})
    assert "was not approved. Please contact support" in no_reason
