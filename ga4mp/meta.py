"""
Version and User-Agent reported to the collector.
"""

from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version
import platform


@lru_cache()
def get_version() -> str:
    try:
        return version("ga4mp")
    except PackageNotFoundError:
        # Source checkout without installed metadata: use the bundled file.
        from ga4mp import VERSION

        return VERSION


@lru_cache()
def get_user_agent() -> str:
    return (
        f"ga4mp/{get_version()} "
        f"(Python/{platform.python_version()}; {platform.system() or 'unknown'})"
    )
