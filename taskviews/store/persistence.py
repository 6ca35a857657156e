# File: /taskviews/store/persistence.py | Version: 1.0 | Title: Persistence bridges for view-store snapshots
from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Dict, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskviews.core.config import settings
from taskviews.core.errors import InvalidStoreKeyError, PersistenceError
from taskviews.crud.view_state import get_state, save_state

log = logging.getLogger(__name__)


def validate_store_key(store_key: str) -> str:
    if store_key not in settings.VALID_STORE_KEYS:
        raise InvalidStoreKeyError(store_key)
    return store_key


class PersistenceBridge(Protocol):
    def load(self, store_key: str) -> Optional[Dict[str, Any]]: ...

    def save(self, store_key: str, snapshot: Dict[str, Any]) -> None: ...


class InMemoryPersistenceBridge:
    """Process-local bridge (tests, offline use)."""

    def __init__(self, initial: Optional[Dict[str, Dict[str, Any]]] = None):
        self._data: Dict[str, Dict[str, Any]] = copy.deepcopy(initial or {})
        self.saves = 0

    def load(self, store_key: str) -> Optional[Dict[str, Any]]:
        state = self._data.get(store_key)
        return copy.deepcopy(state) if state is not None else None

    def save(self, store_key: str, snapshot: Dict[str, Any]) -> None:
        self._data[store_key] = copy.deepcopy(snapshot)
        self.saves += 1


class SqlPersistenceBridge:
    """Writes snapshots straight into the view-state table."""

    def __init__(self, session_factory: Callable[[], Session], owner_id: str):
        self._session_factory = session_factory
        self.owner_id = str(owner_id)

    def load(self, store_key: str) -> Optional[Dict[str, Any]]:
        try:
            with self._session_factory() as db:
                row = get_state(db, owner_id=self.owner_id, store_key=store_key)
                return copy.deepcopy(row.state) if row is not None else None
        except SQLAlchemyError as e:
            raise PersistenceError(f"load failed for {store_key}: {e}") from e

    def save(self, store_key: str, snapshot: Dict[str, Any]) -> None:
        try:
            with self._session_factory() as db:
                save_state(db, owner_id=self.owner_id, store_key=store_key, state=snapshot)
        except SQLAlchemyError as e:
            raise PersistenceError(f"save failed for {store_key}: {e}") from e
