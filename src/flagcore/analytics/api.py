"""HTTP client for the events service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from flagcore.analytics.models import MetricsPayload

__all__ = ["MetricsApi"]

logger = logging.getLogger(__name__)


class MetricsApi:
    """Submits metrics payloads to the events service.

    Args:
        base_url: Base URL of the events service.
        api_key: Bearer token sent with every request.
        timeout: Request timeout in seconds.
        client: Optional pre-configured client. A client passed in is not
            closed by :meth:`aclose`.

    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = client or httpx.AsyncClient(timeout=timeout, headers=headers)
        self._headers = headers

    @property
    def base_url(self) -> str:
        return self._base_url

    async def post_metrics(self, environment: str, cluster: str, payload: MetricsPayload) -> int:
        """POST a payload and return the response status code.

        Raises:
            httpx.HTTPError: On transport failures.

        """
        url = f"{self._base_url}/metrics/{environment}"
        response = await self._client.post(
            url,
            params={"cluster": cluster},
            json=payload.to_dict(),
            headers=self._headers,
        )
        logger.debug("Events service returned %s", response.status_code)
        return response.status_code

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
