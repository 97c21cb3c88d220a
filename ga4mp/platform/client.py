"""
Transports used to deliver request bodies to the collector.

A transport takes the full collector URL and a request body, and returns the
status code and raw body of the response, whatever the status. It only raises
when no response could be obtained at all.
"""

import logging
from typing import Any, Dict, Mapping, NamedTuple, Optional, Protocol, TYPE_CHECKING
from urllib.parse import urlencode

import httpx

from ga4mp.collector.request import serialize_body
from ga4mp.constants import REQUEST_TIMEOUT
from ga4mp.errors import NetworkConnectionError, RequestTimeoutError
from ga4mp.logs_helpers import log_call, redact_url_secret
from ga4mp.meta import get_user_agent

if TYPE_CHECKING:
    from ga4mp.config.proxy import ProxyConfig

logger = logging.getLogger(__name__)


class TransportResponse(NamedTuple):
    status_code: int
    content: bytes = b""


class Transport(Protocol):
    def post(self, url: str, body: Mapping[str, Any]) -> TransportResponse:
        ...


@log_call(redact=("api_secret",))
def build_collect_url(base_url: str, measurement_id: str, api_secret: str) -> str:
    """
    Append the credential query parameters to a collector URL.
    """
    params = urlencode({"measurement_id": measurement_id, "api_secret": api_secret})
    return f"{base_url}?{params}"


class HttpxTransport:
    """
    Synchronous transport backed by httpx.Client.

    Manages the HTTP client creation internally, including proxy settings
    and timeout.
    """

    def __init__(
        self,
        timeout: Optional[float] = REQUEST_TIMEOUT,
        proxy_config: Optional["ProxyConfig"] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self._timeout = timeout
        self._proxy_config = proxy_config
        self._http_client = http_client or self._create_http_client()

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "User-Agent": get_user_agent(),
        }

    def _create_http_client(self) -> httpx.Client:
        client_kwargs = {
            "headers": self._get_headers(),
            "timeout": httpx.Timeout(self._timeout),
        }

        if self._proxy_config:
            client_kwargs["proxy"] = self._proxy_config.as_url()

        return httpx.Client(**client_kwargs)

    def post(self, url: str, body: Mapping[str, Any]) -> TransportResponse:
        """
        POST a JSON body and return the response without judging its status.

        Raises:
            RequestTimeoutError: If the collector did not answer in time.
            NetworkConnectionError: If no connection could be made or the
                response could not be read.
        """
        logger.debug("POST %s", redact_url_secret(url))
        try:
            response = self._http_client.post(
                url,
                content=serialize_body(body).encode("utf-8"),
                headers={"Content-Type": "application/json"},
            )
        except httpx.TimeoutException as e:
            raise RequestTimeoutError() from e
        except httpx.TransportError as e:
            raise NetworkConnectionError(reason=str(e)) from e
        except httpx.RequestError as e:
            # Undecodable bodies and redirect loops leave no usable response either.
            raise NetworkConnectionError(reason=str(e)) from e

        logger.debug("Collector answered %s", response.status_code)
        return TransportResponse(
            status_code=response.status_code, content=response.content
        )

    def close(self) -> None:
        self._http_client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
