"""
Exceptions raised by the APNs client.

Transport failures are not wrapped: httpx exceptions reach the caller as-is.
"""

from typing import TYPE_CHECKING, Any, Dict, Optional

from apnsgate.services.push.constants import APNS_ERROR_CODES, UNKNOWN_ERROR_REASON
from apnsgate.services.push.models import ErrorReason

if TYPE_CHECKING:
    from apnsgate.services.push.models import Notification


class SigningError(Exception):
    """The provider token could not be signed."""


class APNSError(Exception):
    """A notification rejected by APNs (any non-200 response).

    Attributes:
        status_code: HTTP status of the response
        reason: Reason string from the response body
        notification: The notification that was rejected
        fields: Any other keys from the response body (e.g. ``timestamp``)
    """

    def __init__(
        self,
        status_code: int,
        reason: Optional[str],
        notification: "Notification",
        fields: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        self.reason = reason
        self.notification = notification
        self.fields = dict(fields or {})
        super().__init__(self._describe())

    def _describe(self) -> str:
        description = APNS_ERROR_CODES.get(self.reason or "", "Unrecognized reason")
        return f"{self.status_code} {self.reason}: {description}"

    def to_dict(self) -> Dict[str, Any]:
        """Flat view of the rejection: server fields plus status and notification."""
        return {
            **self.fields,
            "reason": self.reason,
            "statusCode": self.status_code,
            "notification": self.notification,
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status_code={self.status_code!r}, "
            f"reason={self.reason!r}, device_token={self.notification.device_token!r})"
        )


class ExpiredProviderTokenError(APNSError):
    """The provider token is stale; the next send must sign a new one."""


class UnknownAPNSError(APNSError):
    """The response body could not be parsed."""

    def __init__(self, status_code: int, notification: "Notification"):
        super().__init__(status_code, UNKNOWN_ERROR_REASON, notification)


_REASON_VARIANTS = {
    ErrorReason.EXPIRED_PROVIDER_TOKEN.value: ExpiredProviderTokenError,
}


def rejection_for(
    status_code: int,
    body: Dict[str, Any],
    notification: "Notification",
) -> APNSError:
    """Create the APNSError variant matching the body's reason."""
    fields = {k: v for k, v in body.items() if k != "reason"}
    reason = body.get("reason")
    if reason is not None and not isinstance(reason, str):
        reason = str(reason)
    error_cls = _REASON_VARIANTS.get(reason or "", APNSError)
    return error_cls(status_code, reason, notification, fields)
