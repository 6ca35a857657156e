# File: /taskviews/clients/_http.py | Version: 1.0 | Title: Shared httpx client construction
from __future__ import annotations

from typing import Dict, Optional

import httpx

from taskviews.core.config import settings


def auth_headers(token: Optional[str] = None) -> Dict[str, str]:
    token = settings.API_TOKEN if token is None else token
    return {"Authorization": f"Bearer {token}"} if token else {}


def async_client(
    base_url: Optional[str] = None,
    token: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url or settings.API_BASE_URL,
        headers=auth_headers(token),
        timeout=settings.HTTP_TIMEOUT_SECONDS,
        transport=transport,
    )


def sync_client(
    base_url: Optional[str] = None,
    token: Optional[str] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    return httpx.Client(
        base_url=base_url or settings.API_BASE_URL,
        headers=auth_headers(token),
        timeout=settings.HTTP_TIMEOUT_SECONDS,
        transport=transport,
    )
