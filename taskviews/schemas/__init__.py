# File: /taskviews/schemas/__init__.py | Version: 1.0 | Path: /taskviews/schemas/__init__.py
from . import filters, view, view_state

__all__ = ["filters", "view", "view_state"]
