from __future__ import annotations

from typing import Any, Optional

import httpx

from .config import Settings, settings
from .log import get_logger

logger = get_logger(__name__)


class StatisticsClient:
    """Async JSON client for the statistics server."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        config: Settings = settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        auth = None
        if config.username:
            auth = httpx.BasicAuth(config.username, config.password or "")
        self.base_url = (base_url or config.server_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else config.request_timeout_seconds,
            auth=auth,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def get_json(self, path: str) -> Any:
        logger.info("GET %s%s", self.base_url, path)
        try:
            response = await self._client.get(path)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            logger.error("GET %s failed: %s", path, exc)
            raise
        except ValueError as exc:
            logger.error("GET %s returned a body that is not JSON: %s", path, exc)
            raise

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "StatisticsClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
