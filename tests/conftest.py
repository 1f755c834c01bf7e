from __future__ import annotations

import json
from typing import Any, Callable, List

import httpx
import pytest

from statboard.transport import StatisticsClient

DESCRIPTION_PATH = "/_admin/statistics-description"


@pytest.fixture
def figures() -> List[dict]:
    return [
        {
            "group": "system",
            "identifier": "userTime",
            "name": "User Time",
            "description": "Amount of time that this process has been scheduled in user mode.",
            "type": "accumulated",
            "units": "seconds",
        },
        {
            "group": "client",
            "identifier": "totalTime",
            "name": "Total Time",
            "description": "Total time needed to answer a request.",
            "type": "distribution",
            "cuts": [0.01, 0.05, 0.1, 0.2, 0.5, 1],
            "units": "seconds",
        },
        {
            "group": "system",
            "identifier": "residentSize",
            "name": "Resident Memory",
            "description": "Resident memory size of the process.",
            "type": "current",
            "units": "bytes",
        },
    ]


@pytest.fixture
def make_client() -> Callable[..., StatisticsClient]:
    """Build a client answering every request through ``handler``."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> StatisticsClient:
        return StatisticsClient(
            base_url="http://stats.test", transport=httpx.MockTransport(handler)
        )

    return factory


@pytest.fixture
def json_handler() -> Callable[..., Callable[[httpx.Request], httpx.Response]]:
    """Handler serving ``body`` on the description path and 404 elsewhere."""

    def factory(body: Any, status_code: int = 200):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path != DESCRIPTION_PATH:
                return httpx.Response(404, json={"error": True})
            return httpx.Response(status_code, content=json.dumps(body).encode())

        return handler

    return factory
