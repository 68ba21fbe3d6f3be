"""Best-effort SMS delivery through the external gateway."""

import asyncio
from typing import Any, Dict, Optional, Sequence

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.core.exceptions import NotificationDeliveryFailed
from app.services.sms_templates import DeliveryOutcome, NotificationEvent, render

logger = structlog.get_logger(__name__)


def mask_phone(phone: Optional[str]) -> str:
    """Keep only the last four digits for logging."""
    if not phone:
        return ""
    return f"***{phone[-4:]}"


class SmsGatewayClient:
    """HTTP client for the SMS gateway's send endpoint."""

    def __init__(
        self,
        base_url: str,
        device_id: str,
        api_key: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize gateway client.

        Args:
            base_url: Gateway base URL (e.g., "https://api.textbee.dev")
            device_id: Gateway device that sends the messages
            api_key: Account API key, sent as ``x-api-key``
            timeout: Per-request timeout in seconds
            client: Optional preconfigured httpx client
        """
        self.base_url = (base_url or "").rstrip("/")
        self.device_id = device_id
        self.api_key = api_key
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.device_id and self.api_key)

    @property
    def send_url(self) -> str:
        return f"{self.base_url}/api/v1/gateway/devices/{self.device_id}/send-sms"

    @retry(
        retry=retry_if_exception_type(httpx.ConnectError),
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.5, max=2),
        reraise=True,
    )
    async def send_sms(self, phone: str, message: str) -> Dict[str, Any]:
        """
        Submit one message to one recipient.

        Only connection failures are retried; a request that reached the
        gateway is never resent.

        Raises:
            httpx.HTTPError: If the request fails or the gateway answers non-2xx
            ValueError: If the reply body is not JSON
        """
        response = await self.client.post(
            self.send_url,
            headers={"Content-Type": "application/json", "x-api-key": self.api_key},
            json={"recipients": [phone], "message": message},
        )
        response.raise_for_status()
        return response.json()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()


class NotificationDispatcher:
    """Renders notification events and hands them to the gateway.

    ``notify`` never raises: every failure mode reduces to ``FAILED``.
    """

    def __init__(self, gateway: SmsGatewayClient, timeout: float = 10.0) -> None:
        self.gateway = gateway
        self.timeout = timeout
        self._tasks: set[asyncio.Task] = set()

    async def notify(self, event: NotificationEvent) -> DeliveryOutcome:
        event.outcome = await self._deliver(event)
        return event.outcome

    def _prepare(self, event: NotificationEvent) -> str:
        """Checks that need no network I/O; returns the rendered message."""
        if not self.gateway.configured:
            raise NotificationDeliveryFailed("SMS gateway not configured")
        if not event.recipient_phone:
            raise NotificationDeliveryFailed("No recipient phone number")
        try:
            return render(event.template_kind, event.payload)
        except (KeyError, ValueError) as e:
            raise NotificationDeliveryFailed(f"Template render failed: {e}") from e

    async def _deliver(self, event: NotificationEvent) -> DeliveryOutcome:
        log = logger.bind(template=event.template_kind.value, recipient=mask_phone(event.recipient_phone))

        try:
            message = self._prepare(event)
        except NotificationDeliveryFailed as e:
            log.warning("sms_dispatch_failed", reason=e.message)
            return DeliveryOutcome.FAILED

        try:
            result = await asyncio.wait_for(
                self.gateway.send_sms(event.recipient_phone, message), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            log.error("sms_dispatch_failed", reason="timeout", timeout=self.timeout)
            return DeliveryOutcome.FAILED
        except httpx.HTTPStatusError as e:
            log.error("sms_dispatch_failed", reason="status", status_code=e.response.status_code)
            return DeliveryOutcome.FAILED
        except httpx.HTTPError as e:
            log.error("sms_dispatch_failed", reason="transport", error=str(e))
            return DeliveryOutcome.FAILED
        except ValueError as e:
            log.error("sms_dispatch_failed", reason="malformed_reply", error=str(e))
            return DeliveryOutcome.FAILED
        except Exception as e:
            log.error("sms_dispatch_failed", reason="unexpected", error=str(e), exc_info=True)
            return DeliveryOutcome.FAILED

        log.info("sms_delivered", gateway_reply=result)
        return DeliveryOutcome.DELIVERED

    async def _notify_all(self, events: Sequence[NotificationEvent]) -> list[DeliveryOutcome]:
        return [await self.notify(event) for event in events]

    def dispatch(self, events: Sequence[NotificationEvent]) -> asyncio.Task:
        """Start delivering ``events`` in a task that outlives the calling request."""
        task = asyncio.create_task(self._notify_all(list(events)))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def dispatch_and_report(self, events: Sequence[NotificationEvent]) -> str:
        """
        Deliver ``events`` after a committed change and summarise the result.

        The wait is shielded: if the caller is cancelled, delivery continues
        in the background.

        Returns:
            "skipped" when there is nothing to send, "delivered" when every
            message was accepted, "failed" otherwise
        """
        if not events:
            return "skipped"
        outcomes = await asyncio.shield(self.dispatch(events))
        if all(outcome is DeliveryOutcome.DELIVERED for outcome in outcomes):
            return DeliveryOutcome.DELIVERED.value
        return DeliveryOutcome.FAILED.value

    async def close(self) -> None:
        """Let in-flight deliveries finish, then close the gateway client."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        await self.gateway.close()
