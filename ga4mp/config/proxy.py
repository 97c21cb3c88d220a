from typing import NamedTuple, Optional, Union
from pathlib import Path
from ga4mp.constants import CONFIG
from .ini import read_section
from .log_codes import (
    PROXY_RESOLVED,
    PROXY_NOT_DEFINED,
    PROXY_HOST_EMPTY,
    PROXY_PROTOCOL_INVALID,
    PROXY_CONFIG_MISSING_SECTION,
)

import logging

logger = logging.getLogger(__name__)


DEFAULT_PROXY_PORT: int = 80
DEFAULT_PROXY_SCHEME: str = "http"
PROXY_ALLOWED_PROTOCOLS = ("http", "https")
PROXY_SECTION_NAME = "proxy"

PROXY_PROTOCOL_KEY = "protocol"
PROXY_HOST_KEY = "host"
PROXY_PORT_KEY = "port"


class ProxyConfig(NamedTuple):
    scheme: str
    host: str
    port: int

    def as_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    def as_dict(self) -> dict[str, Union[str, int]]:
        return {
            PROXY_PROTOCOL_KEY: self.scheme,
            PROXY_HOST_KEY: self.host,
            PROXY_PORT_KEY: str(self.port),
        }


def _build_proxy_config(
    host: Optional[str],
    port: Optional[Union[int, str]],
    scheme: Optional[str],
    source: str,
) -> Optional[ProxyConfig]:
    """
    Build a proxy config from raw values, or return None when nothing was set.

    Raises:
        ValueError: If options were given without a host, or a value is invalid.
    """
    if not host or not host.strip():
        if port is not None or scheme is not None:
            logger.error(PROXY_HOST_EMPTY, extra={"source": source})
            raise ValueError(
                f"Proxy host must be provided when using other proxy options in {source}."
            )
        return None

    scheme = (scheme or DEFAULT_PROXY_SCHEME).lower()
    if scheme not in PROXY_ALLOWED_PROTOCOLS:
        logger.error(
            PROXY_PROTOCOL_INVALID, extra={"protocol": scheme, "source": source}
        )
        raise ValueError(f"Invalid proxy protocol: {scheme!r}")

    port_val = DEFAULT_PROXY_PORT
    if port:
        try:
            port_val = int(port)
        except ValueError:
            raise ValueError("Proxy port must be an integer")

    return ProxyConfig(scheme=scheme, host=host.strip(), port=port_val)


def get_proxy_config(
    host: Optional[str] = None,
    port: Optional[str] = None,
    scheme: Optional[str] = None,
    config_path: Path = CONFIG,
) -> Optional[ProxyConfig]:
    """
    Resolve the effective proxy configuration.

    Resolution order (first non-None wins):
      1. Command-line options
      2. config.ini file
      3. No proxy (returns None)

    Raises:
        ValueError: If the proxy configuration is invalid.
    """
    result = _build_proxy_config(host, port, scheme, source="cli")
    source = "cli"

    if result is None:
        section = read_section(
            config_path, PROXY_SECTION_NAME, PROXY_CONFIG_MISSING_SECTION
        )
        if section is not None:
            result = _build_proxy_config(
                section.get(PROXY_HOST_KEY, None),
                section.get(PROXY_PORT_KEY, None),
                section.get(PROXY_PROTOCOL_KEY, None),
                source="config",
            )
            source = "config"

    if result is None:
        logger.info(PROXY_NOT_DEFINED, extra={"config_path": str(config_path)})
        return None

    extra = {"source": source, **result.as_dict()}
    if source == "config":
        extra["config_path"] = str(config_path)
    logger.info(PROXY_RESOLVED, extra=extra)
    return result
