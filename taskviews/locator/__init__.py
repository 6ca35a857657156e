# File: /taskviews/locator/__init__.py | Version: 1.0 | Path: /taskviews/locator/__init__.py
from .loader import ActiveViewLoader
from .locator import CrossViewLocator, LocateDiagnostic, LocateResult, LocatorState, PairCheck

__all__ = [
    "ActiveViewLoader",
    "CrossViewLocator",
    "LocateDiagnostic",
    "LocateResult",
    "LocatorState",
    "PairCheck",
]
