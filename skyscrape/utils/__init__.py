"""Utility components for Skyscrape."""

from skyscrape.utils.headers import HeaderGenerator, UserAgentRotator
from skyscrape.utils.logging import configure_logfire, setup_local_logging
from skyscrape.utils.retry import get_retryer

__all__ = [
    'HeaderGenerator',
    'UserAgentRotator',
    'configure_logfire',
    'get_retryer',
    'setup_local_logging',
]
