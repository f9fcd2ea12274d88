import logfire
import pytest
import requests

from skyscrape.config import Settings
from skyscrape.core.fetcher import HTMLFetcher, SourceFetcher
from skyscrape.models import FetchResult

logfire.configure(send_to_logfire=False, console=False)

TEST_ENV = {
    'SCRAPE_API_FIRST': 'https://weather.example.com/weather/',
    'SCRAPE_API_LAST': '-weather-forecast-today',
    'SCRAPE_API_FALLBACK': 'https://backup.example.com/forecast/',
    'TEMPERATURE_CLASS': '.wtr_tmp_rhs',
    'MIN_MAX_TEMPERATURE_CLASS': '.wtr_hdr_rhs_val',
    'HUMIDITY_PRESSURE_CLASS': '.wtr_crd_rhs',
    'CONDITION_CLASS': '.wtr_tmp_lhs',
    'DATE_CLASS': '.wtr_hdr_dte',
    'FETCH_BACKOFF': '0',
    'SELECTOR_CHECK_ENABLED': 'false',
}


class FakeFetcher(HTMLFetcher):
    """Fetcher returning canned outcomes per URL and recording every call.

    An outcome is HTML (str) or an exception instance to raise. The last
    outcome for a URL repeats once the list is exhausted.
    """

    def __init__(self, outcomes: dict[str, list[str | Exception]] | None = None, default: str | Exception = ''):
        self.outcomes = outcomes or {}
        self.default = default
        self.calls: list[str] = []

    def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        queue = self.outcomes.get(url)
        if queue:
            outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        else:
            outcome = self.default
        if isinstance(outcome, Exception):
            raise outcome
        return FetchResult(url=url, html=outcome, status_code=200)


def http_error(status_code: int) -> requests.HTTPError:
    response = requests.Response()
    response.status_code = status_code
    return requests.HTTPError(f'{status_code} Client Error', response=response)


@pytest.fixture
def test_env():
    return dict(TEST_ENV)


@pytest.fixture
def settings(test_env):
    return Settings.from_env(test_env)


@pytest.fixture
def primary_url(settings):
    return settings.sources.primary_url('london')


@pytest.fixture
def fallback_url(settings):
    return settings.sources.fallback_url('london')


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def source_fetcher(settings, fake_fetcher):
    return SourceFetcher(settings.sources, fake_fetcher, max_attempts=3, backoff=0)


@pytest.fixture
def weather_html():
    return """
    <!DOCTYPE html>
    <html>
    <head><title>London Weather Forecast Today</title></head>
    <body>
        <div class="wtr_hdr_dte">2025-07-23</div>
        <div class="wtr_tmp_rhs">20°C</div>
        <div class="wtr_tmp_lhs">Sunny</div>
        <div class="wtr_hdr_rhs_ul"><li><span class="wtr_hdr_rhs_val">15°C / 25°C</span></li></div>
        <div class="wtr_crd_li"><span class="wtr_crd_rhs">70% Humidity, 1010 hPa</span></div>
    </body>
    </html>
    """


@pytest.fixture
def reference_html():
    return """
    <html>
    <body>
        <div class="temp-fallback">31°C</div>
        <div class="min-max-temp-fallback">27° / 35°</div>
        <div class="humidity-pressure-fallback">40% Humidity 1002 Pressure</div>
        <div class="condition-fallback">Haze</div>
        <div class="date-fallback">July 23, 2025</div>
    </body>
    </html>
    """


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line('markers', 'integration: marks tests as integration tests')
    config.addinivalue_line('markers', 'unit: marks tests as unit tests')


def pytest_collection_modifyitems(config, items):
    """Apply directory-based marks to collected test items."""

    for item in items:
        if hasattr(item, 'fspath'):
            file_path = str(item.fspath)

            if '/tests/integration/' in file_path:
                item.add_marker(pytest.mark.integration)
            elif '/tests/unit/' in file_path:
                item.add_marker(pytest.mark.unit)
