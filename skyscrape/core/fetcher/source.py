"""Source fetcher: retry the primary weather source, then fall back to the secondary one."""

import logging
import re
import time
from dataclasses import replace
from typing import Literal

import logfire
import requests

from skyscrape.config import SourceConfig
from skyscrape.core.fetcher.base import HTMLFetcher
from skyscrape.exceptions import (
    BotDetectionError,
    UpstreamError,
    UpstreamNotFound,
    UpstreamTimeout,
    UpstreamUnavailable,
)
from skyscrape.models import FetchResult
from skyscrape.utils.retry import get_retryer

RETRYABLE_ERRORS: tuple[type[Exception], ...] = (requests.RequestException, BotDetectionError)

_NOT_FOUND_RE = re.compile(r'not found', re.IGNORECASE)


def classify_error(url: str, error: Exception) -> UpstreamError:
    """Map a transport error to the upstream error taxonomy.

    Args:
        url: URL whose fetch failed
        error: Final error raised for that URL

    Returns:
        UpstreamTimeout, UpstreamNotFound or UpstreamUnavailable

    """
    if isinstance(error, requests.Timeout):
        return UpstreamTimeout(url, str(error))

    response = getattr(error, 'response', None)
    if response is not None and response.status_code == 404:
        return UpstreamNotFound(url, str(error))

    if _NOT_FOUND_RE.search(str(error)):
        return UpstreamNotFound(url, str(error))

    return UpstreamUnavailable(url, str(error))


class SourceFetcher:
    """Fetches weather pages with per-source retries and a fallback source.

    Attributes:
        sources: URL templates for the primary and fallback sources
        fetcher: Single-request fetcher used for every attempt
        max_attempts: Attempts per source
        backoff: Base of the linear backoff, in seconds
        logger: Logger instance

    """

    def __init__(self, sources: SourceConfig, fetcher: HTMLFetcher, max_attempts: int = 3, backoff: float = 0.3):
        """Initialize the source fetcher.

        Args:
            sources: URL templates for the primary and fallback sources
            fetcher: Single-request fetcher
            max_attempts: Attempts per source before moving on. Defaults to 3.
            backoff: Wait before retry n is ``backoff * n`` seconds. Defaults to 0.3.

        """
        self.sources = sources
        self.fetcher = fetcher
        self.max_attempts = max_attempts
        self.backoff = backoff
        self.logger = logging.getLogger(__name__)

    def fetch(self, city_key: str) -> FetchResult:
        """Fetch the weather page for a normalized city key.

        Args:
            city_key: Normalized city key, e.g. 'sao-paulo'

        Returns:
            FetchResult from whichever source succeeded

        Raises:
            UpstreamTimeout: If the fallback source's last attempt timed out
            UpstreamNotFound: If the fallback source's last attempt was a 404
            UpstreamUnavailable: If both sources failed for any other reason

        """
        start_time = time.time()
        primary_url = self.sources.primary_url(city_key)
        fallback_url = self.sources.fallback_url(city_key)

        with logfire.span('fetch_weather_page', city_key=city_key):
            attempts = 0
            try:
                result, attempts = self._fetch_with_retry(primary_url, 'primary')
            except RETRYABLE_ERRORS as e:
                attempts = self.max_attempts
                self.logger.warning(f'Primary source failed, trying fallback: {e}')
                logfire.warn('Primary source failed', url=primary_url, error=str(e))

                try:
                    result, fallback_attempts = self._fetch_with_retry(fallback_url, 'fallback')
                except RETRYABLE_ERRORS as fallback_error:
                    self.logger.error(f'Fallback also failed: {fallback_error}')
                    logfire.error('All weather sources failed', city_key=city_key, error=str(fallback_error))
                    raise classify_error(fallback_url, fallback_error) from fallback_error
                attempts += fallback_attempts

            return replace(result, fetch_time=time.time() - start_time, attempts=attempts)

    def probe(self, city_key: str) -> FetchResult:
        """Fetch the primary source once, with no retries and no fallback.

        Args:
            city_key: Normalized city key

        Returns:
            FetchResult from the primary source

        Raises:
            UpstreamError: If the single request failed

        """
        url = self.sources.primary_url(city_key)
        try:
            return self.fetcher.fetch(url)
        except RETRYABLE_ERRORS as e:
            raise classify_error(url, e) from e

    def _fetch_with_retry(self, url: str, source: Literal['primary', 'fallback']) -> tuple[FetchResult, int]:
        """Fetch one source with linear backoff between attempts.

        Args:
            url: URL of the source
            source: Which source is being fetched, for logging and the result

        Returns:
            Tuple of (result, attempts used)

        Raises:
            requests.RequestException | BotDetectionError: The last error once attempts are exhausted

        """

        def before_sleep_log(retry_state):
            attempt = retry_state.attempt_number
            error = retry_state.outcome.exception()
            self.logger.info(f'{source} fetch attempt {attempt}/{self.max_attempts} failed: {error}')
            logfire.warn('Retrying fetch', url=url, source=source, attempt=attempt, error=str(error))

        retryer = get_retryer(
            max_attempts=self.max_attempts,
            backoff=self.backoff,
            exceptions=RETRYABLE_ERRORS,
            log_callback=before_sleep_log,
        )

        attempts = 0
        for attempt in retryer:
            with attempt:
                attempts += 1
                result = self.fetcher.fetch(url)
                if attempts > 1:
                    self.logger.info(f'{source} fetch succeeded on attempt {attempts}')
                return replace(result, source=source), attempts

        # Unreachable with reraise=True; keeps type checkers satisfied
        raise UpstreamUnavailable(url)
