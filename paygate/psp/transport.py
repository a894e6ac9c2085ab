"""
Blocking HTTP client for confirmation and query calls.

One ``httpx.Client`` is shared across operations; it is thread-safe and
pools connections.
"""
from typing import Optional
from urllib.parse import urlsplit

import httpx

from ..config import settings
from ..exceptions import GatewayTransportError
from ..logging_config import get_logger

logger = get_logger(__name__)


def _redact(url: str) -> str:
    # Query string carries the signature
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}{parts.path}"


class GatewayClient:
    """GET a provider URL and return the body decoded in the provider's encoding."""

    def __init__(self, client: Optional[httpx.Client] = None, timeout: Optional[float] = None):
        self.timeout = timeout if timeout is not None else settings.GATEWAY_HTTP_TIMEOUT
        self._client = client or httpx.Client(timeout=self.timeout)
        self._owns_client = client is None

    def get_text(self, url: str, encoding: str) -> str:
        endpoint = _redact(url)
        try:
            r = self._client.get(url, timeout=self.timeout)
            r.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("gateway_call_failed", endpoint=endpoint, error=type(e).__name__)
            raise GatewayTransportError(
                f"Gateway call to {endpoint} failed ({type(e).__name__})",
                url=endpoint,
                details={"error": type(e).__name__},
            ) from e

        logger.debug("gateway_call_completed", endpoint=endpoint, status_code=r.status_code)
        return r.content.decode(encoding, errors="replace")

    def close(self):
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
