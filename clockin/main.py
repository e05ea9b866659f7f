# clockin/main.py
"""
FastAPI application entry point.

Run with:
    uvicorn clockin.main:app
"""

import os
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from clockin.core.config import APP_VERSION, IS_PRODUCTION, SETTINGS_FILE, TIMEZONE_NAME
from clockin.core.logging_config import LogContext, get_logger, setup_logging
from clockin.core.request_logging import REQUEST_ID_HEADER, RequestLoggingMiddleware
from clockin.core.sentry_config import init_sentry
from clockin.core.storage import SettingsError
from clockin.routes.finance import router as finance_router
from clockin.routes.shared import clear_settings_cache, get_default_finance_settings, get_default_thresholds

# Logging before anything else logs
setup_logging()
logger = get_logger(__name__)

sentry_enabled = init_sentry()


def validate_default_settings() -> None:
    """
    Load the default settings file once so a broken file fails startup.

    Raises:
        SettingsError: If the file is missing or cannot be parsed
    """
    clear_settings_cache()
    with LogContext(settings_file=SETTINGS_FILE, timezone=TIMEZONE_NAME):
        thresholds = get_default_thresholds()
        finance = get_default_finance_settings()
        logger.info(
            "Default settings loaded",
            extra={
                "extra_fields": {
                    "annual_exempt_limit": thresholds.annual_exempt_limit,
                    "exempt_method": finance.exempt_calculation_method.value,
                    "tax_mode": finance.tax_deduction_mode.value,
                    "irs_strategy": finance.irs_strategy.value,
                }
            },
        )


def cors_options() -> dict:
    """
    CORSMiddleware options for the current environment.

    Production allows only CORS_ORIGINS (comma separated) and the two verbs
    the API uses; development allows everything. Credentials are never
    allowed since the API has no cookies.
    """
    origins = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin.strip()]

    if not IS_PRODUCTION:
        return {"allow_origins": ["*"], "allow_methods": ["*"]}

    if not origins:
        logger.warning("PRODUCTION is set but CORS_ORIGINS is empty; browsers will be blocked")
    return {"allow_origins": origins, "allow_methods": ["GET", "POST"]}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Clockin starting",
        extra={
            "extra_fields": {
                "version": APP_VERSION,
                "production": IS_PRODUCTION,
                "timezone": TIMEZONE_NAME,
                "python_version": sys.version,
            }
        },
    )

    try:
        validate_default_settings()
    except SettingsError as e:
        logger.error(f"Refusing to start, default settings unusable: {e}", exc_info=True)
        raise

    yield

    logger.info("Clockin stopped")


app = FastAPI(
    title="Clockin",
    description="Work session classification and Portuguese earnings calculation",
    version=APP_VERSION,
    lifespan=lifespan,
)

cors = cors_options()
app.add_middleware(
    CORSMiddleware,
    allow_credentials=False,
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER, "Content-Disposition"],
    **cors,
)
logger.info(f"CORS origins: {cors['allow_origins']}")

app.add_middleware(RequestLoggingMiddleware)

app.include_router(finance_router)


@app.get("/health", tags=["health"])
def health_check():
    """
    Liveness plus a settings check.

    200 when the default settings file loads, 503 otherwise.
    """
    try:
        get_default_thresholds()
        get_default_finance_settings()
    except SettingsError as e:
        logger.error(f"Health check failed, settings unavailable: {e}")
        raise HTTPException(
            status_code=503,
            detail={"status": "unhealthy", "service": "clockin", "settings": "unavailable"},
        ) from e

    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "service": "clockin",
            "version": APP_VERSION,
            "settings": "loaded",
            "timezone": TIMEZONE_NAME,
            "sentry": sentry_enabled,
        },
    )
