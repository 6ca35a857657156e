# File: /taskviews/core/errors.py | Version: 1.0 | Title: Domain exceptions
from __future__ import annotations


class TaskViewsError(Exception):
    """Base class for every error raised by the views core."""


class RecordFetchError(TaskViewsError):
    def __init__(self, partition: str, message: str):
        super().__init__(f"Failed to fetch records for partition '{partition}': {message}")
        self.partition = partition


class PersistenceError(TaskViewsError):
    pass


class InvalidStoreKeyError(TaskViewsError):
    def __init__(self, store_key: str):
        super().__init__(f"Invalid store key: {store_key!r}")
        self.store_key = store_key


class InvalidFilterError(TaskViewsError):
    pass


class StateNotInitializedError(TaskViewsError):
    pass
