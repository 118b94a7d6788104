"""
Tests for interpreting APNs responses.
"""

import httpx
import pytest

from apnsgate.services.push.exceptions import (
    APNSError,
    ExpiredProviderTokenError,
    UnknownAPNSError,
)
from apnsgate.services.push.models import ErrorReason
from apnsgate.services.push.response_classifier import classify_response


class TestClassifyResponse:
    """Tests for classify_response."""

    def test_success_returns_same_notification(self, notification):
        response = httpx.Response(200, headers={"apns-id": "abc-123"})

        assert classify_response(response, notification) is notification

    def test_rejection_shape(self, notification):
        response = httpx.Response(410, json={"reason": "Unregistered", "timestamp": 1700000000000})

        with pytest.raises(APNSError) as exc_info:
            classify_response(response, notification)

        error = exc_info.value
        assert type(error) is APNSError
        assert error.status_code == 410
        assert error.reason == "Unregistered"
        assert error.notification is notification
        assert error.fields == {"timestamp": 1700000000000}
        assert error.to_dict() == {
            "statusCode": 410,
            "reason": "Unregistered",
            "notification": notification,
            "timestamp": 1700000000000,
        }
        assert "device token is no longer active" in str(error)

    def test_expired_provider_token_variant(self, notification):
        response = httpx.Response(403, json={"reason": ErrorReason.EXPIRED_PROVIDER_TOKEN.value})

        with pytest.raises(ExpiredProviderTokenError) as exc_info:
            classify_response(response, notification)

        assert exc_info.value.status_code == 403

    def test_unparseable_body(self, notification):
        response = httpx.Response(500, content=b"<html>Internal Error</html>")

        with pytest.raises(UnknownAPNSError) as exc_info:
            classify_response(response, notification)

        assert exc_info.value.reason == "unknownError"
        assert exc_info.value.status_code == 500
        assert exc_info.value.notification is notification

    def test_empty_body(self, notification):
        with pytest.raises(UnknownAPNSError):
            classify_response(httpx.Response(503), notification)

    def test_non_object_json_body(self, notification):
        with pytest.raises(UnknownAPNSError):
            classify_response(httpx.Response(400, json=["BadTopic"]), notification)

    def test_body_without_reason(self, notification):
        with pytest.raises(APNSError) as exc_info:
            classify_response(httpx.Response(400, json={}), notification)

        assert exc_info.value.reason is None
        assert not isinstance(exc_info.value, UnknownAPNSError)
