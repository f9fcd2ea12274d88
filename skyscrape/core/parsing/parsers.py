"""Parsers that turn raw extracted text into normalized display values.

None of these raise. Absent, malformed or out-of-bounds input degrades to
``NOT_AVAILABLE`` so that one bad field never takes down the whole record.
"""

import logging
import re
from datetime import datetime

from skyscrape.models import NOT_AVAILABLE

logger = logging.getLogger(__name__)

# Bounds outside of which a reading is treated as a scraping error
TEMPERATURE_BOUNDS = (-100.0, 100.0)
HUMIDITY_BOUNDS = (0.0, 100.0)
PRESSURE_BOUNDS = (300.0, 1100.0)

# Longer temperature text is not a temperature reading
MAX_TEMPERATURE_TEXT = 200

_NUMBER = r'(-?\d+(?:\.\d+)?)'

CELSIUS_PATTERN = re.compile(_NUMBER + r'\s*(?:°\s*C|℃)', re.IGNORECASE)
DEGREE_PATTERN = re.compile(_NUMBER + r'\s*(?:°|℃)')

READING_PATTERN = re.compile(
    r'(?P<label>humidity|pressure)|(?P<value>\d+(?:\.\d+)?)\s*(?P<unit>%|hpa\b|mbar\b|mb\b)?',
    re.IGNORECASE,
)

# Unit that identifies an otherwise unlabelled reading
UNIT_LABELS = {'%': 'humidity', 'hpa': 'pressure', 'mbar': 'pressure', 'mb': 'pressure'}

DATE_FORMATS = (
    '%Y-%m-%d',
    '%Y/%m/%d',
    '%d %B %Y',
    '%d %b %Y',
    '%B %d, %Y',
    '%b %d, %Y',
    '%B %d %Y',
    '%A, %B %d, %Y',
    '%A, %d %B %Y',
    '%a, %d %b %Y',
    '%m/%d/%Y',
    '%d-%m-%Y',
    '%d.%m.%Y',
)


def nth_number(text: str | None, pattern: re.Pattern[str], index: int = 0) -> float | None:
    """Return the numeric capture of the ``index``-th match of ``pattern`` in ``text``.

    Args:
        text: Text blob to search
        pattern: Compiled regex whose first group captures a number
        index: Zero-based match position

    Returns:
        The number, or None if there are not enough matches

    """
    if not text or index < 0:
        return None
    for position, match in enumerate(pattern.finditer(text)):
        if position == index:
            try:
                return float(match.group(1))
            except ValueError:
                return None
    return None


def labelled_readings(text: str | None) -> dict[str, list[float]]:
    """Pair each number in a humidity/pressure blob with its label.

    The layout is taken from the first token: a blob that opens with a label
    reads label-then-value (``'Humidity: 60 Pressure: 1015'``), anything else
    reads value-then-label (``'60% Humidity 1015 Pressure'``). A number left
    without a label is assigned by its unit, so ``'1010 hPa'`` is a pressure.

    Returns:
        Readings per label, in the order they appear

    """
    readings: dict[str, list[float]] = {'humidity': [], 'pressure': []}
    if not text:
        return readings

    tokens = [
        (match['label'].lower(), None, None) if match['label'] else (None, float(match['value']), match['unit'])
        for match in READING_PATTERN.finditer(text)
    ]
    if not tokens:
        return readings

    # A value belongs to the label before it when labels lead, else to the one after
    offset = -1 if tokens[0][0] is not None else 1
    for position, (_, value, unit) in enumerate(tokens):
        if value is None:
            continue
        neighbour = position + offset
        owner = tokens[neighbour][0] if 0 <= neighbour < len(tokens) else None
        owner = owner or UNIT_LABELS.get((unit or '').lower())
        if owner:
            readings[owner].append(value)
    return readings


def first_in_bounds(values: list[float], bounds: tuple[float, float]) -> float | None:
    """Return the first value inside ``bounds``, if any."""
    return next((value for value in values if in_bounds(value, bounds)), None)


def in_bounds(value: float | None, bounds: tuple[float, float]) -> bool:
    """Check that a value is present and inside the inclusive bounds."""
    return value is not None and bounds[0] <= value <= bounds[1]


def format_celsius(value: float | None) -> str:
    """Format a temperature, or return the sentinel when out of bounds."""
    if not in_bounds(value, TEMPERATURE_BOUNDS):
        return NOT_AVAILABLE
    return f'{value:.1f} °C'


def parse_temperature(text: str | None) -> str:
    """Parse the current temperature, e.g. ``'22.5 °C'`` -> ``'22.5 °C'``."""
    if not text or len(text) > MAX_TEMPERATURE_TEXT:
        return NOT_AVAILABLE
    return format_celsius(nth_number(text, CELSIUS_PATTERN))


def parse_min_max_temperature(text: str | None) -> tuple[str, str]:
    """Parse a blob holding the day's low and high temperatures.

    The first degree-marked number is the minimum and the second the maximum,
    matching how the upstream lays them out. If the upstream ever swaps the
    order, min and max transpose silently.

    Returns:
        (minTemperature, maxTemperature)

    """
    return (
        format_celsius(nth_number(text, DEGREE_PATTERN, 0)),
        format_celsius(nth_number(text, DEGREE_PATTERN, 1)),
    )


def parse_humidity_pressure(text: str | None) -> tuple[str, str]:
    """Parse a blob holding relative humidity and air pressure.

    Accepts value-then-label (``'60% Humidity 1015 Pressure'``),
    label-then-value (``'Humidity: 60 Pressure: 1015'``) and bare ``'1015 hPa'``
    readings. Each field takes its first reading inside its bounds.

    Returns:
        (humidity, pressure), e.g. ``('60%', '1015.0 hPa')``

    """
    readings = labelled_readings(text)
    humidity = first_in_bounds(readings['humidity'], HUMIDITY_BOUNDS)
    pressure = first_in_bounds(readings['pressure'], PRESSURE_BOUNDS)

    return (
        f'{int(humidity)}%' if in_bounds(humidity, HUMIDITY_BOUNDS) else NOT_AVAILABLE,
        f'{pressure:.1f} hPa' if in_bounds(pressure, PRESSURE_BOUNDS) else NOT_AVAILABLE,
    )


def parse_date(text: str | None) -> str:
    """Render a date as ``'July 23, 2025'``.

    Text that matches none of the known formats is returned unchanged, since
    the date is display-only.
    """
    if not text:
        return NOT_AVAILABLE

    candidate = ' '.join(text.split())
    for date_format in DATE_FORMATS:
        try:
            parsed = datetime.strptime(candidate, date_format)
        except ValueError:
            continue
        return f'{parsed:%B} {parsed.day}, {parsed.year}'

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        logger.debug('Unrecognized date format: %r', candidate)
        return text
    return f'{parsed:%B} {parsed.day}, {parsed.year}'


def parse_condition(text: str | None) -> str:
    """Collapse whitespace in the condition text."""
    if not text:
        return NOT_AVAILABLE
    return ' '.join(text.split()) or NOT_AVAILABLE
