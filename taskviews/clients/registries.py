# File: /taskviews/clients/registries.py | Version: 1.0 | Title: Priority + column registries (dashboard API)
from __future__ import annotations

import logging
from typing import List

import httpx
from pydantic import TypeAdapter, ValidationError

from taskviews.schemas.view import KnownColumn, PriorityDefinition
from taskviews.store.columns import DEFAULT_COLUMN_WIDTH, merge_known_columns

log = logging.getLogger(__name__)

_priorities_adapter = TypeAdapter(List[PriorityDefinition])


class HttpPriorityRegistry:
    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def list_priorities(self) -> List[PriorityDefinition]:
        resp = await self._client.get("/api/priorities")
        resp.raise_for_status()
        return _priorities_adapter.validate_python(resp.json())


class HttpColumnRegistry:
    """Built-in task columns plus the active custom columns."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def list_columns(self) -> List[KnownColumn]:
        resp = await self._client.get("/api/custom-columns")
        resp.raise_for_status()
        custom: List[KnownColumn] = []
        for item in resp.json():
            if not isinstance(item, dict) or item.get("isActive") is False:
                continue
            try:
                custom.append(
                    KnownColumn(
                        id=item["name"],
                        label=item.get("label") or item["name"],
                        default_width=DEFAULT_COLUMN_WIDTH,
                        is_custom=True,
                    )
                )
            except (KeyError, ValidationError):
                log.warning("Skipping malformed custom column: %r", item)
        return merge_known_columns(custom)
