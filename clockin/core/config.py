# clockin/core/config.py

import os
from typing import Final
from zoneinfo import ZoneInfo


# ==========================
# Environment
# ==========================

#: True when the service runs in production (JSON logs, Sentry, strict CORS).
IS_PRODUCTION: Final[bool] = os.getenv("PRODUCTION", "false").lower() == "true"

#: Application version, reported by /health and used as Sentry release.
APP_VERSION: Final[str] = "0.3.0"


#: Directory for rotating log files.
LOG_DIR: Final[str] = os.getenv("CLOCKIN_LOG_DIR", "logs")

#: Root log level; DEBUG in development unless overridden.
LOG_LEVEL: Final[str] = os.getenv("CLOCKIN_LOG_LEVEL", "INFO" if IS_PRODUCTION else "DEBUG").upper()


# ==========================
# Timezone
# ==========================

#: IANA name of the timezone that defines calendar days and years.
#: Working-day keys, annual Isenção years and report windows all use it.
TIMEZONE_NAME: Final[str] = os.getenv("CLOCKIN_TIMEZONE", "Europe/Lisbon")

#: Resolved timezone object for TIMEZONE_NAME.
ENGINE_TZ: Final[ZoneInfo] = ZoneInfo(TIMEZONE_NAME)


# ==========================
# Settings file
# ==========================

#: JSON file with the default ThresholdSettings / FinanceSettings used when a
#: request does not carry its own settings.
SETTINGS_FILE: Final[str] = os.getenv("CLOCKIN_SETTINGS_FILE", "data/settings.json")


# ==========================
# Date and time formats
# ==========================

#: ISO format for day keys ("2026-03-05").
DATE_FORMAT_ISO: Final[str] = "%Y-%m-%d"

#: Clock format used in CSV reports.
TIME_FORMAT_HMS: Final[str] = "%H:%M:%S"

#: Timestamp format for the "Generated" line of CSV reports.
DATETIME_FORMAT_REPORT: Final[str] = "%Y-%m-%d %H:%M:%S"
