"""Core extraction pipeline and its factories."""

from skyscrape.config import Settings
from skyscrape.core.extraction import SelectorResolver
from skyscrape.core.fetcher import SourceFetcher, create_fetcher
from skyscrape.core.monitoring import AlertSink, SelectorHealthMonitor, create_alert_sink
from skyscrape.core.pipeline import WeatherPipeline


def create_source_fetcher(settings: Settings, fetcher_type: str = 'simple') -> SourceFetcher:
    """Build a source fetcher from settings."""
    return SourceFetcher(
        settings.sources,
        create_fetcher(fetcher_type, timeout=settings.fetch_timeout),
        max_attempts=settings.fetch_retries,
        backoff=settings.fetch_backoff,
    )


def create_pipeline(settings: Settings, source_fetcher: SourceFetcher | None = None) -> WeatherPipeline:
    """Build the weather pipeline from settings."""
    return WeatherPipeline(source_fetcher or create_source_fetcher(settings), SelectorResolver(settings.selectors))


def create_monitor(
    settings: Settings,
    source_fetcher: SourceFetcher | None = None,
    alert_sink: AlertSink | None = None,
) -> SelectorHealthMonitor:
    """Build the selector health monitor from settings."""
    return SelectorHealthMonitor(
        source_fetcher or create_source_fetcher(settings),
        settings.selectors,
        alert_sink or create_alert_sink(settings.mail),
        reference_city=settings.selector_check_city,
        interval=settings.selector_check_interval,
    )


__all__ = [
    'SelectorHealthMonitor',
    'SourceFetcher',
    'WeatherPipeline',
    'create_monitor',
    'create_pipeline',
    'create_source_fetcher',
]
