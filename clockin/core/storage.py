# clockin\core\storage.py
"""
Loading of the default worker settings file.

The file holds two sections, "thresholds" and "finance", in the same shape as
ThresholdSettings and FinanceSettings (snake_case or camelCase keys). A
missing section yields the model defaults.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from clockin.core.config import SETTINGS_FILE
from clockin.core.models import FinanceSettings, ThresholdSettings

logger = logging.getLogger(__name__)


class SettingsError(Exception):
    """General error type for problems loading the settings file."""

    pass


def _load_json(file_path: Path) -> list[Any] | dict[str, Any]:
    """
    Read and parse JSON with robust error handling.
    Args:
        file_path: Path to the JSON file
    Returns:
        Parsed JSON data as list or dict
    Raises:
        SettingsError: If file cannot be read or JSON is invalid
    """
    try:
        raw = file_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.exception("Failed to read JSON file %s", file_path)
        raise SettingsError(f"Could not read JSON file {file_path}: {e}") from e

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.exception("Invalid JSON in file %s", file_path)
        raise SettingsError(f"Invalid JSON in file {file_path}: {e}") from e


def _load_section(section: str, file_path: Path | None) -> dict[str, Any]:
    path = file_path or Path(SETTINGS_FILE)
    data = _load_json(path)
    if not isinstance(data, dict):
        logger.error("Expected settings dict in %s, got %s", path, type(data).__name__)
        raise SettingsError(f"Expected settings dict in {path}")

    value = data.get(section) or {}
    if not isinstance(value, dict):
        logger.error("Section %r in %s is not an object", section, path)
        raise SettingsError(f"Section {section!r} in {path} must be an object")
    return value


def load_threshold_settings(file_path: Path | None = None) -> ThresholdSettings:
    """
    Load the default classifier thresholds.
    Returns:
        ThresholdSettings
    Raises:
        SettingsError: If file cannot be loaded or parsed
    """
    data = _load_section("thresholds", file_path)
    try:
        return ThresholdSettings.model_validate(data)
    except ValidationError as e:
        logger.exception("Failed to parse threshold settings")
        raise SettingsError(f"Could not parse threshold settings: {e}") from e


def load_finance_settings(file_path: Path | None = None) -> FinanceSettings:
    """
    Load the default finance settings.
    Returns:
        FinanceSettings
    Raises:
        SettingsError: If file cannot be loaded or parsed
    """
    data = _load_section("finance", file_path)
    try:
        return FinanceSettings.model_validate(data)
    except ValidationError as e:
        logger.exception("Failed to parse finance settings")
        raise SettingsError(f"Could not parse finance settings: {e}") from e
