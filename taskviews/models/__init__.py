# File: /taskviews/models/__init__.py | Version: 1.0 | Title: Models Package Exports
from .view_state import ViewState

__all__ = ["ViewState"]
