from typing import Optional

class UpstreamError(Exception):
    """Upstream request failed (transport error or unexpected status)"""

    def __init__(self, message: str, status_code: Optional[int] = None, endpoint: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint

class UpstreamNotFoundError(UpstreamError):
    """Upstream has no data for the requested key (HTTP 404)"""

class UpstreamRateLimitError(UpstreamError):
    """Upstream is throttling us (HTTP 429)"""
