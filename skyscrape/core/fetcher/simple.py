"""Simple HTTP fetcher with realistic browser headers."""

import logging
import time

import requests

from skyscrape.core.fetcher.base import HTMLFetcher
from skyscrape.exceptions import BotDetectionError
from skyscrape.models import FetchResult
from skyscrape.utils.headers import HeaderGenerator, UserAgentRotator


class SimpleFetcher(HTMLFetcher):
    """Single-request HTTP fetcher.

    Attributes:
        timeout: Request timeout in seconds
        rotate_user_agent: Whether to pick a random user agent per request
        session: Requests session used for connection pooling
        logger: Logger instance

    """

    def __init__(self, timeout: float = 5.0, rotate_user_agent: bool = False, session: requests.Session | None = None):
        """Initialize the simple fetcher.

        Args:
            timeout: Request timeout in seconds. An attempt that exceeds it is abandoned.
            rotate_user_agent: If True a random user agent is sent with each request
            session: Session to reuse. A new one is created if omitted.

        """
        self.timeout = timeout
        self.rotate_user_agent = rotate_user_agent
        self.session = session or requests.Session()
        self.logger = logging.getLogger(__name__)

    def _get_headers(self) -> dict[str, str]:
        user_agent = UserAgentRotator.get_random() if self.rotate_user_agent else None
        return HeaderGenerator.generate_headers(user_agent=user_agent)

    def fetch(self, url: str) -> FetchResult:
        """Fetch HTML with one GET request.

        Args:
            url: The URL that is being fetched

        Returns:
            The fetched page

        Raises:
            requests.Timeout: If the request exceeded ``timeout``
            requests.HTTPError: If the response status is 4xx or 5xx
            requests.RequestException: On any other transport error
            BotDetectionError: If the response is a block page

        """
        start_time = time.time()

        response = self.session.get(url, headers=self._get_headers(), timeout=self.timeout, allow_redirects=True)
        response.raise_for_status()

        html = response.text
        status_code = response.status_code

        is_blocked, indicators = self._check_for_bot_detection(html, status_code)
        if is_blocked:
            raise BotDetectionError(url, status_code, indicators)

        fetch_time = time.time() - start_time
        self.logger.debug(f'Fetched {len(html):,} characters from {url} ({fetch_time:.2f}s)')

        return FetchResult(url=url, html=html, status_code=status_code, fetch_time=fetch_time)

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the session."""
        self.session.close()
