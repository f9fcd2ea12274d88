"""City query validation and URL key normalization."""

import re
import unicodedata

from skyscrape.exceptions import InvalidCityError

MIN_CITY_LENGTH = 2
MAX_CITY_LENGTH = 50

APOSTROPHES = "'’"
ALLOWED_PUNCTUATION = frozenset(" -." + APOSTROPHES)

_TAG_RE = re.compile(r'<[^>]*>')
_WHITESPACE_RE = re.compile(r'\s+')


def sanitize_city(raw: str) -> str:
    """Trim a raw city query and strip anything that looks like markup."""
    return _TAG_RE.sub('', raw).strip()


def is_valid_city(city: str) -> bool:
    """Check a trimmed city query against the allow-list.

    Letters and combining marks of any script are allowed, plus spaces,
    apostrophes, hyphens and periods. Length must be 2 to 50 characters.
    """
    if not MIN_CITY_LENGTH <= len(city) <= MAX_CITY_LENGTH:
        return False
    return all(
        char in ALLOWED_PUNCTUATION or unicodedata.category(char)[0] in ('L', 'M')
        for char in city
    )


def validate_city(raw: str | None) -> str:
    """Sanitize and validate a city query.

    Args:
        raw: City as received from the client

    Returns:
        The sanitized city

    Raises:
        InvalidCityError: If the city is empty or fails the allow-list

    """
    city = sanitize_city(raw or '')
    if not city or not is_valid_city(city):
        raise InvalidCityError(f'Rejected city query {raw!r}')
    return city


def normalize_city_key(city: str) -> str:
    """Turn a city name into the URL-safe key used by the weather sources.

    >>> normalize_city_key("São Paulo")
    'sao-paulo'
    >>> normalize_city_key("N'Djamena")
    'ndjamena'
    """
    decomposed = unicodedata.normalize('NFD', city)
    stripped = ''.join(
        char for char in decomposed if char not in APOSTROPHES and not unicodedata.combining(char)
    )
    return _WHITESPACE_RE.sub('-', stripped.strip()).lower()
