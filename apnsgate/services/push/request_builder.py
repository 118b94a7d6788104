"""
Builds the HTTP request for a single notification.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Union
from urllib.parse import quote

from apnsgate.services.push.constants import APNS_API_VERSION, APNS_DEVICE_PATH
from apnsgate.services.push.models import APNSConfig, Notification


@dataclass(frozen=True)
class APNSRequest:
    """Everything needed to POST one notification."""

    url: str
    headers: Dict[str, str]
    body: str


def format_expiration(expiration: Union[int, float, datetime]) -> str:
    """Format an expiration (epoch seconds or datetime) as integer epoch seconds.

    Naive datetimes are taken as UTC.
    """
    if isinstance(expiration, datetime):
        if expiration.tzinfo is None:
            expiration = expiration.replace(tzinfo=timezone.utc)
        seconds = expiration.timestamp()
    else:
        seconds = float(expiration)
    return str(int(round(seconds)))


def build_request(notification: Notification, config: APNSConfig, token: str) -> APNSRequest:
    """
    Build the URL, headers and JSON body for a notification.

    Args:
        notification: Notification to deliver
        config: Client configuration (host and default topic)
        token: Signed provider token

    Returns:
        APNSRequest ready to be posted
    """
    path = APNS_DEVICE_PATH.format(
        version=APNS_API_VERSION,
        device_token=quote(notification.device_token, safe=""),
    )
    url = f"https://{config.host}{path}"

    options = notification.options
    headers = {
        "authorization": f"bearer {token}",
        "apns-push-type": notification.push_type.value,
        "apns-priority": str(int(notification.priority)),
    }

    topic = options.topic or config.default_topic
    if topic:
        headers["apns-topic"] = topic
    if options.expiration is not None:
        headers["apns-expiration"] = format_expiration(options.expiration)
    if options.collapse_id:
        headers["apns-collapse-id"] = options.collapse_id

    body = json.dumps(notification.build_apns_options(), separators=(",", ":"))
    return APNSRequest(url=url, headers=headers, body=body)
