"""
Resolution of the collector credentials (measurement id and API secret).
"""
import logging
import os
from pathlib import Path
from typing import NamedTuple, Optional

from ga4mp.constants import API_SECRET_ENV, CONFIG, MEASUREMENT_ID_ENV
from ga4mp.errors import ConfigurationError

from .ini import read_section
from .log_codes import (
    CREDENTIALS_NOT_DEFINED,
    CREDENTIALS_PARTIAL,
    CREDENTIALS_RESOLVED,
)

logger = logging.getLogger(__name__)

CREDENTIALS_SECTION_NAME = "credentials"
MEASUREMENT_ID_KEY = "measurement_id"
API_SECRET_KEY = "api_secret"


class Credentials(NamedTuple):
    measurement_id: str
    api_secret: str


def _from_values(
    measurement_id: Optional[str], api_secret: Optional[str], source: str
) -> Optional[Credentials]:
    if measurement_id and api_secret:
        return Credentials(measurement_id=measurement_id, api_secret=api_secret)

    if measurement_id or api_secret:
        logger.warning(CREDENTIALS_PARTIAL, extra={"source": source})

    return None


def get_credentials(
    measurement_id: Optional[str] = None,
    api_secret: Optional[str] = None,
    config_path: Path = CONFIG,
) -> Credentials:
    """
    Resolve the credentials used to authorize ingestion.

    Resolution order (first complete pair wins):
      1. Explicit values (command-line options)
      2. GA4MP_MEASUREMENT_ID / GA4MP_API_SECRET environment variables
      3. The [credentials] section of config.ini

    Raises:
        ConfigurationError: If no source provides both values.
    """
    result = _from_values(measurement_id, api_secret, source="cli")
    source = "cli"

    if result is None:
        result = _from_values(
            os.getenv(MEASUREMENT_ID_ENV), os.getenv(API_SECRET_ENV), source="env"
        )
        source = "env"

    if result is None:
        section = read_section(config_path, CREDENTIALS_SECTION_NAME)
        if section is not None:
            result = _from_values(
                section.get(MEASUREMENT_ID_KEY, None),
                section.get(API_SECRET_KEY, None),
                source="config",
            )
            source = "config"

    if result is None:
        logger.error(CREDENTIALS_NOT_DEFINED, extra={"config_path": str(config_path)})
        raise ConfigurationError(
            "Missing collector credentials.\n"
            f"Pass --measurement-id and --api-secret, set {MEASUREMENT_ID_ENV} and "
            f"{API_SECRET_ENV}, or add a [{CREDENTIALS_SECTION_NAME}] section to {config_path}."
        )

    logger.info(
        CREDENTIALS_RESOLVED,
        extra={"source": source, "measurement_id": result.measurement_id},
    )
    return result
