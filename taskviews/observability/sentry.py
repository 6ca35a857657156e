# File: taskviews/observability/sentry.py | Version: 1.0 | Title: Optional Sentry initialization
import logging

from taskviews.core.config import settings

log = logging.getLogger(__name__)


def init_sentry_if_configured() -> bool:
    dsn = settings.SENTRY_DSN.strip()
    if not dsn:
        log.info("Sentry disabled (no SENTRY_DSN).")
        return False

    try:
        import sentry_sdk

        traces = settings.SENTRY_TRACES_SAMPLE_RATE
        sentry_sdk.init(
            dsn=dsn,
            traces_sample_rate=traces,
            enable_tracing=traces > 0.0,
        )
        log.info("Sentry initialized.")
        return True
    except Exception as e:  # pragma: no cover (best-effort)
        log.warning("Sentry init failed: %s", e)
        return False
