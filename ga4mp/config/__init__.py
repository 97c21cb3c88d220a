from .credentials import Credentials, get_credentials
from .proxy import ProxyConfig, get_proxy_config

__all__ = [
    "Credentials",
    "get_credentials",
    "ProxyConfig",
    "get_proxy_config",
]
