# File: /taskviews/clients/__init__.py | Version: 1.0 | Path: /taskviews/clients/__init__.py
from .persistence import HttpPersistenceBridge
from .records import HttpRecordSource, RecordSource
from .registries import HttpColumnRegistry, HttpPriorityRegistry

__all__ = [
    "HttpColumnRegistry",
    "HttpPersistenceBridge",
    "HttpPriorityRegistry",
    "HttpRecordSource",
    "RecordSource",
]
