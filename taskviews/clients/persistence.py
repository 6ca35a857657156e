# File: /taskviews/clients/persistence.py | Version: 1.0 | Title: HTTP persistence bridge (view-state service)
from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from taskviews.core.errors import PersistenceError


class HttpPersistenceBridge:
    def __init__(self, client: httpx.Client):
        self._client = client

    def load(self, store_key: str) -> Optional[Dict[str, Any]]:
        try:
            resp = self._client.get(f"/view-state/{store_key}")
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise PersistenceError(f"load failed for {store_key}: {e}") from e
        return data or None

    def save(self, store_key: str, snapshot: Dict[str, Any]) -> None:
        try:
            resp = self._client.post(f"/view-state/{store_key}", json={"state": snapshot})
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise PersistenceError(f"save failed for {store_key}: {e}") from e
