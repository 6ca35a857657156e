# File: /taskviews/main.py | Version: 1.0 | Title: FastAPI App (view-state service + view apply)
from __future__ import annotations

from fastapi import FastAPI

from taskviews.core.config import settings
from taskviews.core.logging import configure_logging
from taskviews.observability.sentry import init_sentry_if_configured
from taskviews.routers import health, view_state, views

# Initialize logging & observability
configure_logging()
init_sentry_if_configured()

app = FastAPI(title="Task Views API")

app.include_router(health.router)
app.include_router(view_state.router)
app.include_router(views.router)

# Optional standardized error responses
if getattr(settings, "ENABLE_STD_ERRORS", False):
    from taskviews.core.error_handlers import register_exception_handlers

    register_exception_handlers(app)
