"""
Models for the APNs client.

Configuration and notification models are pydantic; the small value
objects passed around internally (signing tokens, batch failures) are
dataclasses.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from apnsgate.services.push.constants import (
    APNS_PRODUCTION_HOST,
    APNS_SANDBOX_HOST,
    GENERIC_ERROR_EVENT,
    UNKNOWN_ERROR_REASON,
)


class Host(str, Enum):
    """Known APNs gateway hosts."""

    PRODUCTION = APNS_PRODUCTION_HOST
    DEVELOPMENT = APNS_SANDBOX_HOST


class PushType(str, Enum):
    """Values accepted by the apns-push-type header."""

    ALERT = "alert"
    BACKGROUND = "background"
    VOIP = "voip"
    COMPLICATION = "complication"
    FILEPROVIDER = "fileprovider"
    MDM = "mdm"
    LIVEACTIVITY = "liveactivity"
    LOCATION = "location"
    PUSHTOTALK = "pushtotalk"


class Priority(int, Enum):
    """Values accepted by the apns-priority header."""

    IMMEDIATE = 10
    THROTTLED = 5


class ErrorReason(str, Enum):
    """Reason strings reported by APNs, plus the two local sentinels."""

    BAD_COLLAPSE_ID = "BadCollapseId"
    BAD_DEVICE_TOKEN = "BadDeviceToken"
    BAD_EXPIRATION_DATE = "BadExpirationDate"
    BAD_MESSAGE_ID = "BadMessageId"
    BAD_PRIORITY = "BadPriority"
    BAD_TOPIC = "BadTopic"
    DEVICE_TOKEN_NOT_FOR_TOPIC = "DeviceTokenNotForTopic"
    DUPLICATE_HEADERS = "DuplicateHeaders"
    IDLE_TIMEOUT = "IdleTimeout"
    INVALID_PUSH_TYPE = "InvalidPushType"
    MISSING_DEVICE_TOKEN = "MissingDeviceToken"
    MISSING_TOPIC = "MissingTopic"
    PAYLOAD_EMPTY = "PayloadEmpty"
    TOPIC_DISALLOWED = "TopicDisallowed"
    BAD_CERTIFICATE = "BadCertificate"
    BAD_CERTIFICATE_ENVIRONMENT = "BadCertificateEnvironment"
    EXPIRED_PROVIDER_TOKEN = "ExpiredProviderToken"
    FORBIDDEN = "Forbidden"
    INVALID_PROVIDER_TOKEN = "InvalidProviderToken"
    MISSING_PROVIDER_TOKEN = "MissingProviderToken"
    UNRELATED_KEY_ID_IN_TOKEN = "UnrelatedKeyIdInToken"
    BAD_PATH = "BadPath"
    METHOD_NOT_ALLOWED = "MethodNotAllowed"
    EXPIRED_TOKEN = "ExpiredToken"
    UNREGISTERED = "Unregistered"
    PAYLOAD_TOO_LARGE = "PayloadTooLarge"
    TOO_MANY_PROVIDER_TOKEN_UPDATES = "TooManyProviderTokenUpdates"
    TOO_MANY_REQUESTS = "TooManyRequests"
    INTERNAL_SERVER_ERROR = "InternalServerError"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"
    SHUTDOWN = "Shutdown"

    ERROR = GENERIC_ERROR_EVENT
    UNKNOWN_ERROR = UNKNOWN_ERROR_REASON


class APNSConfig(BaseModel):
    """Client configuration, fixed for the lifetime of an APNSClient.

    Attributes:
        team: Apple developer team id, used as the token issuer
        key_id: Identifier of the signing key (JWT ``kid`` header)
        signing_key: PEM text of the .p8 auth key
        host: Gateway hostname; a Host member or any literal hostname
        default_topic: Fallback apns-topic when a notification has none
        request_timeout: Transport timeout in seconds
        keep_alive: False disables keep-alive, a number sets the idle
            keep-alive expiry in milliseconds
    """

    model_config = ConfigDict(frozen=True)

    team: str = Field(..., min_length=1, description="Team identifier (iss claim)")
    key_id: str = Field(..., min_length=1, description="Key identifier (kid header)")
    signing_key: str = Field(..., repr=False, description="PEM encoded private key")
    host: str = Field(default=APNS_PRODUCTION_HOST, description="Gateway hostname")
    default_topic: Optional[str] = Field(None, description="Default apns-topic")
    request_timeout: Optional[float] = Field(None, gt=0, description="Timeout in seconds")
    keep_alive: Optional[Union[float, bool]] = Field(None, description="Keep-alive option")

    @field_validator("host", mode="before")
    @classmethod
    def validate_host(cls, v: Any) -> str:
        """Accept Host members as well as plain hostnames."""
        if isinstance(v, Host):
            return v.value
        if not v:
            raise ValueError("host cannot be empty")
        return v

    @classmethod
    def from_key_file(cls, key_file: Union[str, Path], **kwargs: Any) -> "APNSConfig":
        """Build a config reading the signing key from a .p8 file."""
        key_path = Path(key_file)
        if not key_path.exists():
            raise FileNotFoundError(f"APNS key file not found: {key_path}")
        return cls(signing_key=key_path.read_text(encoding="utf-8"), **kwargs)


@dataclass(frozen=True)
class SigningToken:
    """A signed provider token and the time (epoch ms) it was created."""

    value: str
    timestamp: int


class APNSAlert(BaseModel):
    """APNs alert dictionary."""

    title: Optional[str] = None
    subtitle: Optional[str] = None
    body: Optional[str] = None
    title_loc_key: Optional[str] = None
    title_loc_args: Optional[List[str]] = None
    loc_key: Optional[str] = None
    loc_args: Optional[List[str]] = None
    action_loc_key: Optional[str] = None
    launch_image: Optional[str] = None

    def to_apns_dict(self) -> Dict[str, Any]:
        alert: Dict[str, Any] = {}
        for name, value in self:
            if value is not None:
                alert[name.replace("_", "-")] = value
        return alert


class NotificationOptions(BaseModel):
    """Per-notification delivery headers and payload content.

    ``topic``, ``expiration`` and ``collapse_id`` become request headers;
    everything else ends up in the JSON body.
    """

    topic: Optional[str] = None
    expiration: Optional[Union[int, float, datetime]] = Field(
        None,
        description="Epoch seconds or a datetime after which APNs stops retrying",
    )
    collapse_id: Optional[str] = None

    alert: Optional[Union[str, APNSAlert]] = None
    badge: Optional[int] = Field(None, ge=0)
    sound: Optional[str] = None
    category: Optional[str] = None
    thread_id: Optional[str] = None
    content_available: bool = False
    mutable_content: bool = False
    target_content_id: Optional[str] = None
    interruption_level: Optional[str] = None
    relevance_score: Optional[float] = Field(None, ge=0.0, le=1.0)
    data: Dict[str, Any] = Field(default_factory=dict, description="Custom root-level keys")

    @field_validator("interruption_level")
    @classmethod
    def validate_interruption_level(cls, v: Optional[str]) -> Optional[str]:
        """Validate interruption level is one of the allowed values."""
        if v is not None:
            allowed = {"passive", "active", "time-sensitive", "critical"}
            if v not in allowed:
                raise ValueError(f"Must be one of: {allowed}")
        return v


class Notification(BaseModel):
    """A notification addressed to a single device."""

    device_token: str = Field(..., min_length=1)
    push_type: PushType = PushType.ALERT
    priority: Priority = Priority.IMMEDIATE
    options: NotificationOptions = Field(default_factory=NotificationOptions)

    def build_apns_options(self) -> Dict[str, Any]:
        """Build the JSON payload sent as the request body."""
        opts = self.options
        aps: Dict[str, Any] = {}

        if isinstance(opts.alert, APNSAlert):
            aps["alert"] = opts.alert.to_apns_dict()
        elif opts.alert is not None:
            aps["alert"] = opts.alert
        if opts.badge is not None:
            aps["badge"] = opts.badge
        if opts.sound:
            aps["sound"] = opts.sound
        if opts.category:
            aps["category"] = opts.category
        if opts.thread_id:
            aps["thread-id"] = opts.thread_id
        if opts.content_available:
            aps["content-available"] = 1
        if opts.mutable_content:
            aps["mutable-content"] = 1
        if opts.target_content_id:
            aps["target-content-id"] = opts.target_content_id
        if opts.interruption_level:
            aps["interruption-level"] = opts.interruption_level
        if opts.relevance_score is not None:
            aps["relevance-score"] = opts.relevance_score

        payload: Dict[str, Any] = {"aps": aps}
        payload.update(opts.data)
        return payload


class SilentNotification(Notification):
    """Background update with no user-visible content."""

    push_type: PushType = PushType.BACKGROUND
    priority: Priority = Priority.THROTTLED

    def build_apns_options(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"aps": {"content-available": 1}}
        payload.update(self.options.data)
        return payload


@dataclass(frozen=True)
class SendError:
    """Per-item failure in the result of APNSClient.send_many."""

    error: Exception
