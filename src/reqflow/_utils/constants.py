# Environment variables
ENV_DEBUG = "REQFLOW_DEBUG"
ENV_TRACE = "REQFLOW_TRACE"
ENV_TIMEOUT = "REQFLOW_TIMEOUT"
ENV_USER_AGENT = "REQFLOW_USER_AGENT"

# Headers
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_COOKIE = "Cookie"
HEADER_USER_AGENT = "User-Agent"

# Headers owned by the transport; kept when a header encoder clears the request
FRAMING_HEADERS = frozenset({"host", "content-length", "transfer-encoding"})

# Default Content-Type per body encoder name
CONTENT_TYPES = {
    "json": "application/json",
    "xml": "application/xml",
    "yaml": "application/x-yaml",
    "www-form": "application/x-www-form-urlencoded",
}

# Request
QUERY_SENTINEL = "?"
LOCALHOST_URL = "http://127.0.0.1"
CONTEXT_EXTENSION = "reqflow.context"
DEFAULT_TIMEOUT = 5.0

# Response
MAX_DRAIN_BYTES = 4096

SDK_VERSION = "0.1.0"
