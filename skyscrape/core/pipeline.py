"""Weather extraction pipeline.

Validate → Normalize → Fetch → ResolveFields → Parse → Assemble.
"""

import logging

import logfire

from skyscrape.core.cities import normalize_city_key, validate_city
from skyscrape.core.extraction import SelectorResolver, parse_html
from skyscrape.core.fetcher import SourceFetcher
from skyscrape.core.parsing import (
    parse_condition,
    parse_date,
    parse_humidity_pressure,
    parse_min_max_temperature,
    parse_temperature,
)
from skyscrape.exceptions import DataNotFoundError, ParsingError
from skyscrape.models import NOT_AVAILABLE, REQUIRED_FIELDS, WeatherRecord


class WeatherPipeline:
    """Turns a city query into a normalized weather record.

    The pipeline holds no per-request state, so one instance serves
    concurrent requests.

    Attributes:
        source_fetcher: Fetches the page with retries and source fallback
        resolver: Resolves logical fields with primary and fallback selectors
        logger: Logger instance for detailed run tracking

    """

    def __init__(self, source_fetcher: SourceFetcher, resolver: SelectorResolver):
        """Initialize the pipeline.

        Args:
            source_fetcher: Configured source fetcher
            resolver: Selector resolver built from the shared selector configuration

        """
        self.source_fetcher = source_fetcher
        self.resolver = resolver
        self.logger = logging.getLogger(__name__)

    def get_weather(self, city: str) -> WeatherRecord:
        """Fetch and extract the current weather for a city.

        Args:
            city: City as supplied by the client

        Returns:
            The assembled weather record

        Raises:
            InvalidCityError: If the city fails validation. No request is made.
            UpstreamError: If every source failed (timeout, not found or other)
            DataNotFoundError: If temperature or condition is missing from the page
            ParsingError: If the temperature was found but is not a sane reading

        """
        city = validate_city(city)
        city_key = normalize_city_key(city)

        with logfire.span('get_weather', city=city, city_key=city_key):
            self.logger.info(f'Fetching weather for {city!r} (key={city_key})')

            result = self.source_fetcher.fetch(city_key)
            self.logger.info(
                f'Fetched {len(result.html):,} characters from {result.source} source '
                f'in {result.attempts} attempt(s) ({result.fetch_time:.2f}s)'
            )

            raw = self.resolver.resolve_all(parse_html(result.html))
            record = self.assemble(raw)

            logfire.info('Weather extracted', city_key=city_key, source=result.source, missing=record.missing_fields)
            return record

    def assemble(self, raw: dict[str, str | None]) -> WeatherRecord:
        """Parse resolved field text and build the record.

        Args:
            raw: Resolved text per logical field; None when absent

        Returns:
            The weather record

        Raises:
            DataNotFoundError: If a required field's text was never found
            ParsingError: If the temperature text was found but did not parse

        """
        missing = [name for name in REQUIRED_FIELDS if not raw.get(name)]
        if missing:
            self.logger.warning(f'Required field(s) not found: {missing}')
            raise DataNotFoundError(missing)

        temperature = parse_temperature(raw['temperature'])
        if temperature == NOT_AVAILABLE:
            raise ParsingError('temperature', raw['temperature'] or '')

        min_temperature, max_temperature = parse_min_max_temperature(raw.get('min_max_temperature'))
        humidity, pressure = parse_humidity_pressure(raw.get('humidity_pressure'))

        return WeatherRecord(
            date=parse_date(raw.get('date')),
            temperature=temperature,
            condition=parse_condition(raw['condition']),
            min_temperature=min_temperature,
            max_temperature=max_temperature,
            humidity=humidity,
            pressure=pressure,
        )
