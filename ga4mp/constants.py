# -*- coding: utf-8 -*-
import configparser
import os
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Optional

DIR_NAME = ".ga4mp"


def get_user_dir() -> Path:
    """
    Get the user directory for the ga4mp configuration.

    Returns:
        Path: The user directory path.
    """
    raw_dir = os.getenv("GA4MP_USER_CONFIG_PATH")
    if raw_dir:
        return Path(raw_dir)

    path = Path("~", DIR_NAME).expanduser()
    return path


USER_CONFIG_DIR = get_user_dir()

CONFIG_FILE_NAME = "config.ini"
CONFIG_FILE_USER = USER_CONFIG_DIR / CONFIG_FILE_NAME
CONFIG = CONFIG_FILE_USER

DEFAULT_DOMAIN = "www.google-analytics.com"


class URLSettings(Enum):
    COLLECT_URL = f"https://{DEFAULT_DOMAIN}/mp/collect"
    DEBUG_COLLECT_URL = f"https://{DEFAULT_DOMAIN}/debug/mp/collect"


def get_config_setting(name: str, default=None) -> Optional[str]:
    """
    Get the configuration setting from the config file or defaults.

    Args:
        name (str): The name of the setting to retrieve.

    Returns:
        Optional[str]: The value of the setting if found, otherwise None.
    """
    config = configparser.ConfigParser()
    config.read(CONFIG)

    if name in [setting.name for setting in URLSettings]:
        default = URLSettings[name]

    if "settings" in config.sections() and name in config["settings"]:
        value = config["settings"][name]
        if value:
            return value

    return default.value if default else default


URL_LIVE = get_config_setting("COLLECT_URL")
URL_DEBUG = get_config_setting("DEBUG_COLLECT_URL")

# Response codes the collector uses to accept a request
ALLOW_RESPONSE_CODES = (200, 204)
NO_CONTENT = 204

# Limits
MAX_EVENTS_PER_REQUEST = 25
MAX_USER_PROPERTIES = 25
KB = 1024
MAX_REQUEST_BODY_BYTES = 130 * KB
MAX_TIMESTAMP_AGE = timedelta(days=3)
MICROS_PER_SECOND = 1_000_000

# Fetch the REQUEST_TIMEOUT from the environment variable, defaulting to 30 if not set
REQUEST_TIMEOUT = int(os.getenv("GA4MP_REQUEST_TIMEOUT", 30))

MEASUREMENT_ID_ENV = "GA4MP_MEASUREMENT_ID"
API_SECRET_ENV = "GA4MP_API_SECRET"

# Exit codes
EXIT_CODE_FAILURE = 1
EXIT_CODE_VALIDATION_ERROR = 2
EXIT_CODE_SUBMISSION_FAILED = 3
EXIT_CODE_TRANSPORT_ERROR = 4
EXIT_CODE_CONFIGURATION_ERROR = 5
