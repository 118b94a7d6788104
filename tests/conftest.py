"""Pytest fixtures and configuration for test suite

This module provides:
1. Key material and client configuration fixtures
2. A recording fake signer and a controllable clock
3. Helpers for building httpx clients backed by MockTransport

Factory Functions:
    - make_notification(**overrides) -> Notification
    - make_mock_client(handler) -> httpx.AsyncClient
"""
import asyncio
import pytest
import httpx
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from apnsgate.services.push.models import APNSConfig, Host, Notification, NotificationOptions


# =============================================================================
# Factory Functions for Test Objects
# =============================================================================

def make_notification(
    device_token: str = "a1b2c3d4e5f6",
    **options
) -> Notification:
    """
    Factory function to create Notification instances for testing.

    Args:
        device_token: Target device token.
        **options: NotificationOptions fields (topic, expiration, alert, ...).

    Returns:
        Notification instance.

    Example:
        notification = make_notification(alert="Hello", topic="com.example.other")
    """
    return Notification(device_token=device_token, options=NotificationOptions(**options))


def make_mock_client(handler) -> httpx.AsyncClient:
    """Create an httpx AsyncClient whose requests are answered by handler."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class FakeSigner:
    """Signer that records calls and returns numbered tokens."""

    def __init__(self):
        self.calls = []

    async def sign(self, claims, algorithm, key_id):
        self.calls.append({"claims": claims, "algorithm": algorithm, "key_id": key_id})
        # Yield so concurrent callers can interleave with the refresh
        await asyncio.sleep(0)
        return f"token-{len(self.calls)}"


class FakeClock:
    """Epoch-seconds clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def ec_private_key_pem():
    """PEM text of a freshly generated P-256 key (like an Apple .p8 file)."""
    private_key = ec.generate_private_key(ec.SECP256R1())
    pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    return pem.decode("utf-8")


@pytest.fixture
def apns_config(ec_private_key_pem):
    """Create a test APNS configuration."""
    return APNSConfig(
        team="TEAMID1234",
        key_id="KEYID12345",
        signing_key=ec_private_key_pem,
        host=Host.DEVELOPMENT,
        default_topic="com.example.app",
    )


@pytest.fixture
def fake_signer():
    return FakeSigner()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def notification():
    return make_notification(alert="Hello")
