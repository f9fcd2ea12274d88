"""Skyscrape - resilient weather scraping API.

Scrape once per request, alert before the selectors rot.
"""

__version__ = '1.0.0'
LAST_UPDATED = '2023-10-01'

from skyscrape.config import Settings, load_settings  # noqa: E402
from skyscrape.core import (  # noqa: E402
    SelectorHealthMonitor,
    SourceFetcher,
    WeatherPipeline,
    create_monitor,
    create_pipeline,
)
from skyscrape.exceptions import (  # noqa: E402
    ConfigurationError,
    DataNotFoundError,
    InvalidCityError,
    ParsingError,
    SkyscrapeError,
    UpstreamError,
    UpstreamNotFound,
    UpstreamTimeout,
    UpstreamUnavailable,
)
from skyscrape.models import (  # noqa: E402
    NOT_AVAILABLE,
    FieldSelectors,
    SelectorConfig,
    SelectorHealthReport,
    WeatherRecord,
)

__all__ = [
    '__version__',
    # Configuration
    'Settings',
    'load_settings',
    # Core components
    'SelectorHealthMonitor',
    'SourceFetcher',
    'WeatherPipeline',
    'create_monitor',
    'create_pipeline',
    # Errors
    'ConfigurationError',
    'DataNotFoundError',
    'InvalidCityError',
    'ParsingError',
    'SkyscrapeError',
    'UpstreamError',
    'UpstreamNotFound',
    'UpstreamTimeout',
    'UpstreamUnavailable',
    # Models
    'NOT_AVAILABLE',
    'FieldSelectors',
    'SelectorConfig',
    'SelectorHealthReport',
    'WeatherRecord',
]
