from functools import lru_cache
import logging
import os
import sys
from typing import Any, Dict

from rich.console import Console
from rich.theme import Theme


LOG = logging.getLogger(__name__)


@lru_cache()
def should_use_ascii():
    """
    Check if we should avoid emojis in the output
    """
    encoding = (getattr(sys.stdout, "encoding", None) or "").lower()

    if encoding in {"utf-8", "utf8", "cp65001", "utf-8-sig"}:
        return False

    return True


GA4MP_THEME = {
    "problem": "red",
    "ok": "bold green",
    "warning": "bold yellow",
}


non_interactive = os.getenv("NON_INTERACTIVE") == "1"

console_kwargs: Dict[str, Any] = {
    "theme": Theme(GA4MP_THEME),
    "emoji": not should_use_ascii(),
}

if non_interactive:
    LOG.info(
        "NON_INTERACTIVE environment variable is set, forcing non-interactive mode"
    )
    console_kwargs["force_terminal"] = True
    console_kwargs["force_interactive"] = False

main_console = Console(**console_kwargs)
