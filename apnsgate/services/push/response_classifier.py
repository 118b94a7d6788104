"""
Interprets APNs responses.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from apnsgate.services.push.exceptions import APNSError, UnknownAPNSError, rejection_for
from apnsgate.services.push.models import Notification

logger = logging.getLogger(__name__)


def parse_error_body(response: httpx.Response) -> Optional[Dict[str, Any]]:
    """Decode an error body; None when it is not a JSON object."""
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def classify_response(response: httpx.Response, notification: Notification) -> Notification:
    """
    Return the notification for a 200 response, raise an APNSError otherwise.

    Args:
        response: Completed response from APNs
        notification: The notification that was sent

    Returns:
        The same notification object on success

    Raises:
        APNSError: The matching variant for any non-200 status
    """
    if response.status_code == 200:
        return notification
    raise build_rejection(response, notification)


def build_rejection(response: httpx.Response, notification: Notification) -> APNSError:
    """Build the APNSError variant describing a non-200 response."""
    body = parse_error_body(response)
    if body is None:
        logger.warning(
            "APNS error response body could not be parsed",
            extra={"status_code": response.status_code},
        )
        return UnknownAPNSError(response.status_code, notification)
    return rejection_for(response.status_code, body, notification)
