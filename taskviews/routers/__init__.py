# File: /taskviews/routers/__init__.py | Version: 1.0 | Path: /taskviews/routers/__init__.py
"""
Router package exports.
"""
from . import health, view_state, views

__all__ = ["health", "view_state", "views"]
