from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import httpx
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import RedirectResponse

from .config import settings
from .errors import MalformedResponseError
from .log import get_logger
from .statistics.collection import StatisticsDescriptionCollection
from .transport import StatisticsClient

logger = get_logger(__name__)

client: Optional[StatisticsClient] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global client
    client = StatisticsClient()
    try:
        yield
    finally:
        await client.aclose()
        client = None


app = FastAPI(title=settings.app_name, lifespan=lifespan)


def get_client() -> StatisticsClient:
    if client is None:
        raise HTTPException(status_code=503, detail="Statistics client is not running.")
    return client


async def load_descriptions(
    stats_client: StatisticsClient = Depends(get_client),
) -> StatisticsDescriptionCollection:
    collection = StatisticsDescriptionCollection()
    try:
        await collection.fetch(stats_client)
    except httpx.HTTPError as exc:
        raise HTTPException(
            status_code=502, detail=f"Statistics server request failed: {exc}"
        ) from exc
    except (MalformedResponseError, ValueError) as exc:
        logger.error("Unusable statistics description: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return collection


@app.get("/", include_in_schema=False)
async def root_redirect() -> RedirectResponse:
    return RedirectResponse("/dashboard")


@app.get("/dashboard")
async def dashboard(
    descriptions: StatisticsDescriptionCollection = Depends(load_descriptions),
):
    groups = [
        {
            "group": group,
            "figures": [record.to_dict() for record in records],
        }
        for group, records in descriptions.grouped().items()
    ]
    return {
        "app_name": settings.app_name,
        "refresh_interval": settings.refresh_interval_seconds,
        "groups": groups,
    }


@app.get("/api/statistics/descriptions")
async def read_descriptions(
    group: Optional[str] = Query(None),
    descriptions: StatisticsDescriptionCollection = Depends(load_descriptions),
) -> List[Dict[str, Any]]:
    if group is None:
        return descriptions.to_list()
    return [record.to_dict() for record in descriptions.in_group(group)]


@app.get("/api/statistics/descriptions/{identifier}")
async def read_description(
    identifier: str,
    descriptions: StatisticsDescriptionCollection = Depends(load_descriptions),
) -> Dict[str, Any]:
    try:
        return descriptions.get(identifier).to_dict()
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
