"""
APNs (Apple Push Notification service) client.

Features:
- HTTP/2 transport via httpx
- Provider token (JWT, ES256) cached for 55 minutes, re-signed on demand
- Single send raising typed APNSError rejections
- Best-effort concurrent batch send
- Reason-keyed and generic error events for observers
"""

import asyncio
import logging
from typing import TYPE_CHECKING, List, Optional, Sequence, Union

import httpx

from apnsgate.services.push.constants import GENERIC_ERROR_EVENT
from apnsgate.services.push.events import EventChannel, Listener
from apnsgate.services.push.exceptions import APNSError, ExpiredProviderTokenError
from apnsgate.services.push.models import APNSConfig, Notification, SendError
from apnsgate.services.push.request_builder import build_request
from apnsgate.services.push.response_classifier import classify_response
from apnsgate.services.push.signing import JWTSigner, Signer
from apnsgate.services.push.token_cache import TokenCache

if TYPE_CHECKING:
    from apnsgate.core.config import Settings

logger = logging.getLogger(__name__)


def _short_token(device_token: str) -> str:
    return device_token[:20] + "..." if len(device_token) > 20 else device_token


class APNSClient:
    """
    Sends notifications to APNs.

    Usage:
        config = APNSConfig(
            team="TEAMID1234",
            key_id="KEYID12345",
            signing_key=Path("AuthKey_KEYID12345.p8").read_text(),
            host=Host.DEVELOPMENT,
            default_topic="com.example.app",
        )
        async with APNSClient(config) as client:
            client.on("Unregistered", forget_device)
            await client.send(Notification(device_token=token))

    Attributes:
        config: Client configuration
        events: Channel where rejections are published
        token_cache: Provider token cache
    """

    def __init__(
        self,
        config: APNSConfig,
        signer: Optional[Signer] = None,
        client: Optional[httpx.AsyncClient] = None,
        token_cache: Optional[TokenCache] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Client configuration
            signer: Token signer, defaults to JWTSigner over config.signing_key
            client: httpx client to use; created lazily (and owned) if omitted
            token_cache: Pre-built token cache, mainly for tests
        """
        self.config = config
        self.events = EventChannel()
        self.token_cache = token_cache or TokenCache(
            signer or JWTSigner(config.signing_key),
            team=config.team,
            key_id=config.key_id,
        )
        self._client = client
        self._owns_client = client is None

        logger.info(
            "APNS client initialized",
            extra={"host": config.host, "default_topic": config.default_topic},
        )

    @classmethod
    def from_settings(cls, settings: Optional["Settings"] = None, **kwargs) -> "APNSClient":
        """Create a client from APNS_* settings (the global settings by default)."""
        if settings is None:
            from apnsgate.core.config import settings
        return cls(settings.to_apns_config(), **kwargs)

    def _build_client(self) -> httpx.AsyncClient:
        keep_alive = self.config.keep_alive
        if keep_alive is False:
            limits = httpx.Limits(max_keepalive_connections=0)
        elif keep_alive is not None and keep_alive is not True:
            limits = httpx.Limits(keepalive_expiry=keep_alive / 1000)
        else:
            limits = httpx.Limits()

        if self.config.request_timeout:
            timeout = httpx.Timeout(self.config.request_timeout)
        else:
            timeout = httpx.Timeout(30.0, connect=10.0)

        return httpx.AsyncClient(http2=True, timeout=timeout, limits=limits)

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP/2 client."""
        if self._client is None or self._client.is_closed:
            self._client = self._build_client()
            self._owns_client = True
        return self._client

    # Events

    def on(self, event: str, listener: Listener) -> None:
        self.events.on(event, listener)

    def once(self, event: str, listener: Listener) -> None:
        self.events.once(event, listener)

    def off(self, event: str, listener: Listener) -> None:
        self.events.off(event, listener)

    # Sending

    async def send(self, notification: Notification) -> Notification:
        """
        Send a notification to a single device.

        Args:
            notification: Notification to deliver

        Returns:
            The same notification object once APNs accepted it

        Raises:
            APNSError: APNs rejected the notification
            httpx.HTTPError: The request itself failed
        """
        token = await self.token_cache.get_token()
        request = build_request(notification, self.config, token)

        client = self._get_client()
        response = await client.post(request.url, content=request.body, headers=request.headers)

        try:
            result = classify_response(response, notification)
        except APNSError as error:
            self._handle_rejection(error)
            raise

        logger.debug(
            "APNS notification sent",
            extra={
                "device_token": _short_token(notification.device_token),
                "apns_id": response.headers.get("apns-id"),
            },
        )
        return result

    def _handle_rejection(self, error: APNSError) -> None:
        """Self-heal on a stale token, then publish the rejection."""
        if isinstance(error, ExpiredProviderTokenError):
            self.token_cache.invalidate()

        logger.warning(
            f"APNS notification rejected: {error}",
            extra={
                "status_code": error.status_code,
                "reason": error.reason,
                "device_token": _short_token(error.notification.device_token),
            },
        )

        if error.reason:
            self.events.emit(error.reason, error)
        self.events.emit(GENERIC_ERROR_EVENT, error)

    async def send_many(
        self,
        notifications: Sequence[Notification],
        concurrency: Optional[int] = None,
    ) -> List[Union[Notification, SendError]]:
        """
        Send several notifications concurrently.

        Never raises: each failed item is returned as SendError in the
        position of its notification.

        Args:
            notifications: Notifications to deliver
            concurrency: Maximum sends in flight, unbounded if None

        Returns:
            One entry per notification, in input order
        """
        if not notifications:
            return []

        semaphore = asyncio.Semaphore(concurrency) if concurrency else None

        async def send_one(notification: Notification) -> Union[Notification, SendError]:
            try:
                if semaphore is None:
                    return await self.send(notification)
                async with semaphore:
                    return await self.send(notification)
            except Exception as e:
                return SendError(error=e)

        results = await asyncio.gather(*[send_one(n) for n in notifications])

        failed = sum(1 for r in results if isinstance(r, SendError))
        logger.info(
            "APNS batch send complete",
            extra={
                "total": len(results),
                "success": len(results) - failed,
                "failed": failed,
            },
        )
        return list(results)

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
            logger.debug("APNS client closed")

    async def __aenter__(self) -> "APNSClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
