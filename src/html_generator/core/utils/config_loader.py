# src/html_generator/core/utils/config_loader.py
import json
import logging
from typing import Any, Dict, Optional
from html_generator.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


def load_config() -> Dict[str, Any]:
    """Loads the application defaults from the packaged settings.json."""
    config_path = PathUtils.get_settings_file()

    if not config_path.exists():
        logger.warning("Configuration file 'settings.json' not found at %s. Using empty config.", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to load settings.json: %s", e, exc_info=True)
        return {}


CONFIG = load_config()


def get_nested_config(key_path: str, default: Optional[Any] = None) -> Any:
    """Dotted lookup into the packaged defaults: get_nested_config("generator.language")."""
    value = CONFIG
    for key in key_path.split('.'):
        if not isinstance(value, dict):
            return default
        value = value.get(key)
    return default if value is None else value
