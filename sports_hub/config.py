"""
Configuration loading for the Sports Hub application.

Settings come from a JSON file shipped next to this module. The Gemini API key
is never stored there; it is read from the GEMINI_KEY environment variable.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from sports_hub.constants import (
    DEFAULT_ARTICLE_COUNT,
    GEMINI_CHAT_MODEL,
    GEMINI_TEXT_MODEL,
)

logger = logging.getLogger(__name__)

API_KEY_ENV_VAR = "GEMINI_KEY"

DEFAULTS: Dict[str, Any] = {
    "text_model": GEMINI_TEXT_MODEL,
    "chat_model": GEMINI_CHAT_MODEL,
    "article_count": DEFAULT_ARTICLE_COUNT,
    "log_level": "INFO",
}


def load_config(config_filename: str = "config.json") -> Dict[str, Any]:
    """Loads configuration from a JSON file, filling gaps with defaults."""
    # Build absolute path relative to this module
    base_dir = os.path.dirname(os.path.abspath(__file__))
    config_path = os.path.join(base_dir, config_filename)

    config = dict(DEFAULTS)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config.update(json.load(f))
    except FileNotFoundError:
        logger.warning("Config file not found at %s. Using defaults.", config_path)
    return config


def get_api_key() -> Optional[str]:
    """Reads the Gemini API key from the environment."""
    return os.environ.get(API_KEY_ENV_VAR)


def configure_logging(level: str = "INFO") -> None:
    """Applies the application's log format."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
