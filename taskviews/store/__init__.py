# File: /taskviews/store/__init__.py | Version: 1.0 | Path: /taskviews/store/__init__.py
from .persistence import InMemoryPersistenceBridge, PersistenceBridge, SqlPersistenceBridge
from .reconciler import reconcile_view
from .view_store import ViewStore, new_view

__all__ = [
    "InMemoryPersistenceBridge",
    "PersistenceBridge",
    "SqlPersistenceBridge",
    "ViewStore",
    "new_view",
    "reconcile_view",
]
