"""Selector health monitor.

Periodically fetches a reference city and checks that the configured
selectors still match the upstream markup, so drift is reported to an
operator before the API starts returning empty records.
"""

import logging
import threading

import logfire

from skyscrape.core.cities import normalize_city_key
from skyscrape.core.extraction import SelectorResolver, parse_html
from skyscrape.core.fetcher import SourceFetcher
from skyscrape.core.monitoring.alerts import AlertSink
from skyscrape.exceptions import UpstreamError
from skyscrape.models import SelectorConfig, SelectorHealthReport

DEFAULT_INTERVAL = 24 * 60 * 60


class SelectorHealthMonitor:
    """Checks selectors against a reference page on a fixed interval.

    Each field is probed with its fallback selector, which doubles as a
    generic existence check for the field.

    Attributes:
        source_fetcher: Fetcher whose primary source is probed
        config: Selector configuration shared with the request path
        alert_sink: Receives one alert per unhealthy cycle
        reference_city: City probed every cycle
        interval: Seconds between cycles
        last_report: Report of the most recent cycle, if any
        logger: Logger instance

    """

    def __init__(
        self,
        source_fetcher: SourceFetcher,
        config: SelectorConfig,
        alert_sink: AlertSink,
        reference_city: str = 'delhi',
        interval: float = DEFAULT_INTERVAL,
    ):
        """Initialize the monitor.

        Args:
            source_fetcher: Fetcher used for the single primary-source probe
            config: Selector configuration
            alert_sink: Alert destination
            reference_city: Known-good city to probe. Defaults to 'delhi'.
            interval: Seconds between checks. Defaults to 24 hours.

        """
        self.source_fetcher = source_fetcher
        self.config = config
        self.resolver = SelectorResolver(config)
        self.alert_sink = alert_sink
        self.reference_city = normalize_city_key(reference_city)
        self.interval = interval
        self.last_report: SelectorHealthReport | None = None
        self.logger = logging.getLogger(__name__)

        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def check(self) -> SelectorHealthReport:
        """Run one health check cycle.

        Alerts at most once. Never raises for fetch or alert failures.

        Returns:
            The health report for this cycle

        """
        url = self.source_fetcher.sources.primary_url(self.reference_city)

        with logfire.span('selector_health_check', url=url):
            try:
                result = self.source_fetcher.probe(self.reference_city)
            except UpstreamError as e:
                self.logger.error(f'Error during selector validation: {e}')
                report = SelectorHealthReport(reference_city=self.reference_city, url=url, fetch_error=str(e))
            else:
                soup = parse_html(result.html)
                failed = [
                    field_name
                    for field_name, selectors in self.config.items()
                    if not self.resolver.matches(soup, selectors.fallback)
                ]
                report = SelectorHealthReport(reference_city=self.reference_city, url=url, failed_fields=failed)

            self.last_report = report

            if report.healthy:
                self.logger.info('All selectors validated successfully.')
                logfire.info('Selectors healthy', url=url)
            else:
                self.logger.warning(f'Selector validation failed for: {report.alert_fields}')
                logfire.warn('Selectors unhealthy', url=url, failed=report.alert_fields)
                self._alert(report)

        return report

    def _alert(self, report: SelectorHealthReport) -> None:
        try:
            self.alert_sink.send(report)
        except Exception as e:
            self.logger.exception(f'Failed to send selector alert: {e}')
            logfire.error('Selector alert failed', error=str(e))

    def _run(self) -> None:
        # Check immediately, then every interval until stopped
        while not self._stop_event.is_set():
            try:
                self.check()
            except Exception:
                self.logger.exception('Unexpected error in selector health monitor')
            if self._stop_event.wait(self.interval):
                break

    def start(self) -> None:
        """Start checking on a background thread. No-op if already running."""
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name='selector-health-monitor', daemon=True)
        self._thread.start()
        self.logger.info(f'Selector health monitor started (every {self.interval:.0f}s)')

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop the background thread."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
