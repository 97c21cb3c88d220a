"""
Helpers for reading sections of the user config.ini file.
"""
import configparser
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def read_section(
    config_path: Path, section_name: str, missing_log_code: Optional[str] = None
) -> Optional[configparser.SectionProxy]:
    """
    Read a single section from an ini file.

    Args:
        config_path (Path): The path to the config.ini file.
        section_name (str): The section to return.
        missing_log_code (Optional[str]): Log code emitted when the file
            exists but the section does not.

    Returns:
        Optional[configparser.SectionProxy]: The section, or None if the file
        or the section is missing.
    """
    config = configparser.ConfigParser()
    config_files = config.read(filenames=[config_path])

    if not config_files or not config.has_section(section_name):
        if config_files and missing_log_code:
            logger.debug(missing_log_code, extra={"config_path": str(config_path)})
        return None

    return config[section_name]
