"""HTTP constants for the transport layer.

Centralizes all HTTP-related constants to avoid duplication across modules.
"""

# HTTP Status Code Ranges
HTTP_STATUS_NETWORK_ERROR = 0
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_NO_CONTENT = 204
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_REQUEST_TIMEOUT = 408
HTTP_STATUS_TOO_MANY_REQUESTS = 429
HTTP_STATUS_CLIENT_ERROR_MIN = 400
HTTP_STATUS_SERVER_ERROR_MIN = 500
HTTP_STATUS_SERVER_ERROR_MAX = 600

# Organization headers accepted by the tracker API
ORG_HEADER_ORG_ID = "X-Org-ID"
ORG_HEADER_CLOUD_ORG_ID = "X-Cloud-Org-ID"

DEFAULT_BASE_URL = "https://api.tracker.yandex.net"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "tracker-gateway/0.1"

# Fallback wait when a 429 response carries no usable Retry-After (seconds)
DEFAULT_RETRY_AFTER_SECONDS = 60

# Maximum honored Retry-After (seconds)
MAX_RETRY_AFTER_SECONDS = 60
