# -*- coding: utf-8 -*-

__author__ = """ga4mp contributors"""

import os

ROOT = os.path.dirname(os.path.abspath(__file__))

with open(os.path.join(ROOT, 'VERSION')) as version_file:
    VERSION = version_file.read().strip()

from ga4mp.analytics import Analytics  # noqa: E402
from ga4mp.errors import (  # noqa: E402
    AggregatedSubmissionError,
    LimitExceededError,
    ValidationError,
)
from ga4mp.models import Event, UserProperty  # noqa: E402

__all__ = [
    "Analytics",
    "AggregatedSubmissionError",
    "Event",
    "LimitExceededError",
    "UserProperty",
    "ValidationError",
    "VERSION",
]
