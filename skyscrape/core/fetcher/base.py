"""Abstract base class for HTML fetchers."""

from abc import ABC, abstractmethod

from skyscrape.models import FetchResult


class HTMLFetcher(ABC):
    """Abstract base class for HTML fetchers.

    A fetcher performs exactly one request per call. Retries and source
    fallback live in ``SourceFetcher``.
    """

    @abstractmethod
    def fetch(self, url: str) -> FetchResult:
        """Fetch HTML from a URL.

        Args:
            url: URL to fetch

        Returns:
            FetchResult with HTML and status

        Raises:
            requests.RequestException: On transport errors and non-2xx responses
            BotDetectionError: If the page is a block or challenge page

        """

    def close(self) -> None:
        """Release any held resources."""

    def _check_for_bot_detection(self, html: str, status_code: int) -> tuple[bool, list[str]]:
        """Check if a successful response is actually a block page.

        Args:
            html: The HTML of the URL
            status_code: The status code of the URL returned

        Returns:
            Tuple of (is_blocked, indicators)

        """
        if status_code != 200:
            return False, []

        # Block messages appear near the top of the page
        html_check = html[:2000].lower()

        strict_indicators = {
            'challenge-form': 'Cloudflare challenge',
            'cf-captcha': 'Cloudflare CAPTCHA',
            'access denied</title>': 'Access denied page',
            'rate limit exceeded': 'Rate limit',
            'please verify you are human': 'Human verification',
            'enable javascript to continue': 'JavaScript block',
        }

        found = [message for indicator, message in strict_indicators.items() if indicator in html_check]
        return bool(found), found
