"""
Constants for the APNs HTTP/2 client.
"""

# APNs Hosts
APNS_PRODUCTION_HOST = "api.push.apple.com"
APNS_SANDBOX_HOST = "api.sandbox.push.apple.com"

# APNs API version and path
APNS_API_VERSION = 3
APNS_DEVICE_PATH = "/{version}/device/{device_token}"

# JWT configuration
JWT_ALGORITHM = "ES256"

# Apple recommends refreshing the provider token between 20 and 60 minutes
RESET_TOKEN_INTERVAL_MS = 55 * 60 * 1000

# Local event / reason names (not sent by APNs)
GENERIC_ERROR_EVENT = "error"
UNKNOWN_ERROR_REASON = "unknownError"

# APNs Error Codes (from response body "reason")
APNS_ERROR_CODES = {
    # Client errors
    "BadCollapseId": "The collapse identifier exceeds the maximum allowed size",
    "BadDeviceToken": "The specified device token is invalid",
    "BadExpirationDate": "The apns-expiration value is invalid",
    "BadMessageId": "The apns-id value is invalid",
    "BadPriority": "The apns-priority value is invalid",
    "BadTopic": "The apns-topic value is invalid",
    "DeviceTokenNotForTopic": "The device token doesn't match the specified topic",
    "DuplicateHeaders": "One or more headers are repeated",
    "IdleTimeout": "Idle timeout",
    "InvalidPushType": "The apns-push-type value is invalid",
    "MissingDeviceToken": "The device token is not specified in the request path",
    "MissingTopic": "The apns-topic header is missing from the request",
    "PayloadEmpty": "The message payload is empty",
    "TopicDisallowed": "Pushing to this topic is not allowed",
    "BadPath": "The request contained an invalid :path value",
    "MethodNotAllowed": "The specified :method value isn't POST",
    "PayloadTooLarge": "The message payload is too large",

    # Token errors
    "BadCertificate": "The certificate is invalid",
    "BadCertificateEnvironment": "The client certificate is for the wrong environment",
    "ExpiredProviderToken": "The provider token is stale and a new token should be generated",
    "Forbidden": "The specified action is not allowed",
    "InvalidProviderToken": "The provider token is not valid or the token signature cannot be verified",
    "MissingProviderToken": "No provider certificate was used to connect to APNs",
    "UnrelatedKeyIdInToken": "The key ID in the provider token is unrelated to the signing key",

    # Device token errors
    "ExpiredToken": "The device token has expired",
    "Unregistered": "The device token is no longer active for the topic",

    # Server errors
    "TooManyProviderTokenUpdates": "The provider token has been updated too often",
    "TooManyRequests": "Too many requests were made consecutively to the same device token",
    "InternalServerError": "An internal server error occurred",
    "ServiceUnavailable": "The service is unavailable",
    "Shutdown": "The server is shutting down",

    # Local
    UNKNOWN_ERROR_REASON: "The response body could not be parsed",
}
