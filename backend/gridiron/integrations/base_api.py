import httpx
import time
from typing import Dict, Any, Optional
from gridiron.integrations.errors import UpstreamError, UpstreamNotFoundError, UpstreamRateLimitError
import logging

logger = logging.getLogger(__name__)

class BaseAPIClient:
    """Base class for all API integrations"""

    def __init__(
        self,
        source_name: str,
        base_url: str,
        default_params: Optional[Dict] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.source_name = source_name
        self.base_url = base_url
        self.default_params = default_params or {}
        self.timeout = timeout
        self.session = httpx.AsyncClient(transport=transport)

    async def _make_request(
        self,
        endpoint: str,
        method: str = "GET",
        params: Optional[Dict] = None,
        headers: Optional[Dict] = None
    ) -> Dict[Any, Any]:
        """Make API request with logging and error translation"""

        url = f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        start_time = time.time()

        request_params = dict(self.default_params)
        if params:
            request_params.update(params)

        try:
            response = await self.session.request(
                method=method,
                url=url,
                params=request_params,
                headers=headers,
                timeout=self.timeout
            )
        except httpx.HTTPError as e:
            logger.error(f"{self.source_name} request error on {endpoint}: {e}")
            raise UpstreamError(str(e) or type(e).__name__, endpoint=endpoint) from e

        response_time = int((time.time() - start_time) * 1000)
        logger.debug(f"{self.source_name} {method} {endpoint} -> {response.status_code} ({response_time}ms)")

        if response.status_code == 200:
            return response.json()

        logger.error(f"{self.source_name} request failed: {response.status_code} - {endpoint}")
        if response.status_code == 404:
            raise UpstreamNotFoundError(f"No data found for {endpoint}", status_code=404, endpoint=endpoint)
        if response.status_code == 429:
            raise UpstreamRateLimitError(f"Rate limited on {endpoint}", status_code=429, endpoint=endpoint)
        raise UpstreamError(
            f"Unexpected status {response.status_code} for {endpoint}",
            status_code=response.status_code,
            endpoint=endpoint
        )

    async def close(self):
        """Close the HTTP session"""
        await self.session.aclose()
