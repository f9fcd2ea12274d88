"""Models for fetch results, weather records and selector health reports."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

NOT_AVAILABLE = 'N/A'

ALL_SELECTORS_FAILED = 'ALL_SELECTORS_FAILED'


@dataclass
class FetchResult:
    """Result of a successful HTML fetch.

    Attributes:
        url: URL the HTML was fetched from
        html: HTML content of the page
        status_code: HTTP status code of the final response
        fetch_time: Total time spent fetching, retries included
        source: Which configured source produced the page
        attempts: Number of HTTP requests issued, across all sources

    """

    url: str
    html: str
    status_code: int = 200
    fetch_time: float = 0.0
    source: Literal['primary', 'fallback'] = 'primary'
    attempts: int = 1


class WeatherRecord(BaseModel):
    """Normalized weather data returned to clients.

    Every field is a display string; values that could not be extracted or
    failed their sanity bounds hold ``NOT_AVAILABLE``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: str = NOT_AVAILABLE
    temperature: str = NOT_AVAILABLE
    condition: str = NOT_AVAILABLE
    min_temperature: str = Field(default=NOT_AVAILABLE, alias='minTemperature')
    max_temperature: str = Field(default=NOT_AVAILABLE, alias='maxTemperature')
    humidity: str = NOT_AVAILABLE
    pressure: str = NOT_AVAILABLE

    @property
    def missing_fields(self) -> list[str]:
        """Names of the fields holding the sentinel value."""
        return [name for name, value in self.model_dump().items() if value == NOT_AVAILABLE]

    def to_response(self) -> dict[str, str]:
        """Serialize with the camelCase keys of the public API."""
        return self.model_dump(by_alias=True)


class SelectorHealthReport(BaseModel):
    """Outcome of one selector health check.

    Attributes:
        reference_city: City key the probe was run against
        url: URL that was probed
        checked_at: When the check ran (UTC)
        failed_fields: Logical fields whose probe selector matched nothing
        fetch_error: Error message when the probe fetch itself failed

    """

    model_config = ConfigDict(populate_by_name=True)

    reference_city: str = Field(alias='referenceCity')
    url: str
    checked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias='checkedAt')
    failed_fields: list[str] = Field(default_factory=list, alias='failedFields')
    fetch_error: str | None = Field(default=None, alias='fetchError')

    @property
    def healthy(self) -> bool:
        """True if the probe succeeded and every selector matched."""
        return not self.failed_fields and self.fetch_error is None

    @property
    def alert_fields(self) -> list[str]:
        """Field names to report in an alert."""
        if self.fetch_error is not None:
            return [ALL_SELECTORS_FAILED]
        return list(self.failed_fields)

    def to_response(self) -> dict:
        """Serialize with the camelCase keys of the public API."""
        return {
            'status': 'healthy' if self.healthy else 'unhealthy',
            **self.model_dump(mode='json', by_alias=True),
            'alertFields': self.alert_fields,
        }
