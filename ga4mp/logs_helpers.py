import functools
import inspect
import logging
import time
from typing import Iterable

REDACTED = "***"


def redact_url_secret(url: str) -> str:
    """
    Hide the api_secret query parameter of a collector URL.
    """
    marker = "api_secret="
    start = url.find(marker)
    if start == -1:
        return url

    start += len(marker)
    end = url.find("&", start)
    return url[:start] + REDACTED + (url[end:] if end != -1 else "")


def log_call(*, show_args=True, show_result=False, redact: Iterable[str] = ()):
    """
    Configurable logging decorator.

    Args:
        show_args: Log function arguments (default: True)
        show_result: Log return value (default: False)
        redact: Parameter names whose values are never logged, whether
            passed by position or by keyword
    """
    hidden = frozenset(redact)

    def decorator(func):
        logger = logging.getLogger(func.__module__)
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if logger.isEnabledFor(logging.DEBUG):
                if show_args:
                    bound = signature.bind_partial(*args, **kwargs)
                    call_repr = ", ".join(
                        f"{k}={REDACTED if k in hidden else repr(v)}"
                        for k, v in bound.arguments.items()
                    )
                    logger.debug("-> %s(%s)", func.__name__, call_repr)
                else:
                    logger.debug("-> %s", func.__name__)

            started = time.monotonic()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error("x %s failed: %s", func.__name__, e)
                raise

            if logger.isEnabledFor(logging.DEBUG):
                elapsed_ms = (time.monotonic() - started) * 1000
                if show_result:
                    logger.debug(
                        "<- %s => %r (%.1f ms)", func.__name__, result, elapsed_ms
                    )
                else:
                    logger.debug("<- %s (%.1f ms)", func.__name__, elapsed_ms)

            return result

        return wrapper

    return decorator
