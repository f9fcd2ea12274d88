"""Field parsers."""

from skyscrape.core.parsing.parsers import (
    nth_number,
    parse_condition,
    parse_date,
    parse_humidity_pressure,
    parse_min_max_temperature,
    parse_temperature,
)

__all__ = [
    'nth_number',
    'parse_condition',
    'parse_date',
    'parse_humidity_pressure',
    'parse_min_max_temperature',
    'parse_temperature',
]
