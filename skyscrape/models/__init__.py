"""Pydantic models for selectors and results."""

from skyscrape.models.results import (
    ALL_SELECTORS_FAILED,
    NOT_AVAILABLE,
    FetchResult,
    SelectorHealthReport,
    WeatherRecord,
)
from skyscrape.models.selectors import (
    DEFAULT_FALLBACK_SELECTORS,
    FIELD_NAMES,
    REQUIRED_FIELDS,
    FieldSelectors,
    SelectorConfig,
)

__all__ = [
    'ALL_SELECTORS_FAILED',
    'DEFAULT_FALLBACK_SELECTORS',
    'FIELD_NAMES',
    'NOT_AVAILABLE',
    'REQUIRED_FIELDS',
    'FetchResult',
    'FieldSelectors',
    'SelectorConfig',
    'SelectorHealthReport',
    'WeatherRecord',
]
