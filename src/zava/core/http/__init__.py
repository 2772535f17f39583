from .client import get_http_client, post_json
from .errors import ZavaHTTPError, ZavaHTTPNetworkError, ZavaHTTPStatusError, ZavaHTTPTimeoutError

__all__ = [
    "get_http_client",
    "post_json",
    "ZavaHTTPError",
    "ZavaHTTPNetworkError",
    "ZavaHTTPStatusError",
    "ZavaHTTPTimeoutError",
]
