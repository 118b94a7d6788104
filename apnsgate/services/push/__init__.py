"""
APNs push notification client.

This package contains:
- APNSClient - send / send_many over the HTTP/2 API
- TokenCache and Signer - provider token signing and caching
- build_request / classify_response - the request and response halves of a send
- EventChannel - reason-keyed rejection events for observers
"""

from apnsgate.services.push.apns_client import APNSClient
from apnsgate.services.push.events import EventChannel
from apnsgate.services.push.exceptions import (
    APNSError,
    ExpiredProviderTokenError,
    SigningError,
    UnknownAPNSError,
)
from apnsgate.services.push.models import (
    APNSAlert,
    APNSConfig,
    ErrorReason,
    Host,
    Notification,
    NotificationOptions,
    Priority,
    PushType,
    SendError,
    SigningToken,
    SilentNotification,
)
from apnsgate.services.push.request_builder import APNSRequest, build_request
from apnsgate.services.push.response_classifier import classify_response
from apnsgate.services.push.signing import JWTSigner, Signer
from apnsgate.services.push.token_cache import TokenCache

__all__ = [
    # Client
    "APNSClient",
    "APNSConfig",
    "Host",
    # Notifications
    "Notification",
    "NotificationOptions",
    "SilentNotification",
    "APNSAlert",
    "PushType",
    "Priority",
    # Tokens
    "TokenCache",
    "Signer",
    "JWTSigner",
    "SigningToken",
    # Requests / responses
    "APNSRequest",
    "build_request",
    "classify_response",
    # Errors and events
    "APNSError",
    "ExpiredProviderTokenError",
    "UnknownAPNSError",
    "SigningError",
    "ErrorReason",
    "EventChannel",
    "SendError",
]
