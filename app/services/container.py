"""Process-wide services, built once at startup and closed at shutdown."""

from dataclasses import dataclass
from typing import Optional

import httpx

from app.config import Settings
from app.core.security import CredentialVault, TokenCodec
from app.services.notification_dispatcher import NotificationDispatcher, SmsGatewayClient


@dataclass
class ServiceContainer:
    """Stateless collaborators shared by every request."""

    settings: Settings
    vault: CredentialVault
    codec: TokenCodec
    dispatcher: NotificationDispatcher

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: Optional[httpx.AsyncClient] = None
    ) -> "ServiceContainer":
        gateway = SmsGatewayClient(
            base_url=settings.SMS_GATEWAY_URL,
            device_id=settings.SMS_DEVICE_ID,
            api_key=settings.SMS_API_KEY,
            timeout=settings.SMS_TIMEOUT_SECONDS,
            client=http_client,
        )
        return cls(
            settings=settings,
            vault=CredentialVault(rounds=settings.BCRYPT_ROUNDS),
            codec=TokenCodec(settings.signing_key, settings.JWT_ALGORITHM),
            dispatcher=NotificationDispatcher(gateway, timeout=settings.SMS_TIMEOUT_SECONDS),
        )

    async def close(self) -> None:
        await self.dispatcher.close()
