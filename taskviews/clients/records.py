# File: /taskviews/clients/records.py | Version: 1.0 | Title: Record source (dashboard task API)
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from taskviews.core.errors import RecordFetchError
from taskviews.engine.records import normalize_records

log = logging.getLogger(__name__)

GUIDANCE_PARTITION = "guidance"


class RecordSource(Protocol):
    async def fetch(self, partition: str, subject_id: Optional[str] = None) -> List[Dict[str, Any]]: ...


def partition_path(partition: str, subject_id: Optional[str] = None) -> str:
    base = "/api/tasks/received" if subject_id is None else f"/api/tasks/received/user/{subject_id}"
    if partition == GUIDANCE_PARTITION:
        return f"{base}/guidance"
    return base


class HttpRecordSource:
    """Fetches one partition of received tasks; results are normalized."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def fetch(self, partition: str, subject_id: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {} if partition == GUIDANCE_PARTITION else {"tab": partition}
        try:
            resp = await self._client.get(partition_path(partition, subject_id), params=params)
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError as e:
            raise RecordFetchError(partition, f"HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise RecordFetchError(partition, str(e) or type(e).__name__) from e

        if not isinstance(payload, list):
            raise RecordFetchError(partition, "expected a JSON list of tasks")
        log.debug("Fetched %d records for %s", len(payload), partition)
        return normalize_records(r for r in payload if isinstance(r, dict))
