# clockin/core/sentry_config.py
"""
Sentry error tracking, enabled only in production with a SENTRY_DSN.

Events come from unhandled HTTP errors, ERROR log records and series windows
that were replaced by zero points.

Environment:
    SENTRY_DSN                  project DSN (required to enable)
    SENTRY_ENVIRONMENT          defaults to "production"
    SENTRY_TRACES_SAMPLE_RATE   defaults to 0.1
    RELEASE_VERSION             defaults to "clockin@<APP_VERSION>"
"""

import logging
import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from clockin.core.config import APP_VERSION, IS_PRODUCTION

logger = logging.getLogger(__name__)

FILTERED = "[Filtered]"

_SENSITIVE_HEADERS = ("cookie", "authorization", "x-api-key")

#: Request body keys that hold lists of sessions.
_SESSION_LISTS = ("sessions", "history")

#: Session fields that may hold free text written by the worker.
_FREE_TEXT_FIELDS = ("notes", "location")


def _traces_sample_rate() -> float:
    raw = os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")
    try:
        return min(1.0, max(0.0, float(raw)))
    except ValueError:
        logger.warning(f"Invalid SENTRY_TRACES_SAMPLE_RATE {raw!r}, using 0.1")
        return 0.1


def init_sentry() -> bool:
    """
    Initialize Sentry error tracking.

    Returns:
        True if Sentry was initialized, False otherwise.
    """
    if not IS_PRODUCTION:
        logger.info("Sentry disabled outside production")
        return False

    dsn = os.getenv("SENTRY_DSN", "").strip()
    if not dsn:
        logger.warning("SENTRY_DSN not set, error tracking disabled")
        return False

    environment = os.getenv("SENTRY_ENVIRONMENT", "production")
    release = os.getenv("RELEASE_VERSION", f"clockin@{APP_VERSION}")
    try:
        sentry_sdk.init(
            dsn=dsn,
            integrations=[
                FastApiIntegration(),
                StarletteIntegration(),
                LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
            ],
            traces_sample_rate=_traces_sample_rate(),
            release=release,
            environment=environment,
            send_default_pii=False,
            attach_stacktrace=True,
            before_send=before_send_hook,
        )
    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}", exc_info=True)
        return False

    logger.info(f"Sentry initialized ({environment}, {release})")
    return True


def _scrub_body(body) -> None:
    if not isinstance(body, dict):
        return
    for key in _SESSION_LISTS:
        sessions = body.get(key)
        if not isinstance(sessions, list):
            continue
        for session in sessions:
            if not isinstance(session, dict):
                continue
            for field in _FREE_TEXT_FIELDS:
                if field in session:
                    session[field] = FILTERED

    details = body.get("details")
    if isinstance(details, dict):
        for field in _FREE_TEXT_FIELDS:
            if field in details:
                details[field] = FILTERED


def before_send_hook(event, hint):
    """
    Filter sensitive data before sending to Sentry.

    Masks credential headers and the worker's notes / location on sessions
    in the request body (statement and series payloads, classify history
    and details).
    """
    request = event.get("request")
    if request:
        headers = request.get("headers") or {}
        for header in _SENSITIVE_HEADERS:
            if header in headers:
                headers[header] = FILTERED
        _scrub_body(request.get("data"))

    return event


def capture_exception(error: Exception, context: dict | None = None) -> None:
    """
    Send an exception to Sentry; a no-op when Sentry was not initialized.

    Args:
        error: Exception to capture
        context: Extra key/values attached as the "clockin" context
    """
    if not context:
        sentry_sdk.capture_exception(error)
        return

    with sentry_sdk.new_scope() as scope:
        scope.set_context("clockin", context)
        sentry_sdk.capture_exception(error)
