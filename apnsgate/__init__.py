"""apnsgate - Apple Push Notification service client over HTTP/2."""

__version__ = "1.0.0"
