"""Custom exceptions for Skyscrape.

Every error that can reach an API client carries a machine-readable ``code``,
the HTTP ``status_code`` it maps to, and a fixed human-readable ``message``.
Upstream error text is kept on the exception for logging only.
"""


class SkyscrapeError(Exception):
    """Base class for all Skyscrape exceptions."""

    code = 'SERVER_ERROR'
    status_code = 500
    message = 'Unexpected server error. Please try again later.'

    def __init__(self, detail: str | None = None):
        """Initialize the error.

        Args:
            detail: Internal detail for logs. Never sent to API clients.

        """
        self.detail = detail
        super().__init__(detail or self.message)


class ConfigurationError(SkyscrapeError):
    """Raised when required configuration is missing at startup."""

    def __init__(self, missing: list[str]):
        """Initialize configuration error.

        Args:
            missing: Names of the environment variables that are not set

        """
        self.missing = missing
        super().__init__(f'Missing environment variable(s): {", ".join(missing)}')


class InvalidCityError(SkyscrapeError):
    """Raised when a client-supplied city fails validation."""

    code = 'INVALID_CITY'
    status_code = 400
    message = "Invalid city name. Use letters, spaces, apostrophes (') and hyphens (-)"


class UpstreamError(SkyscrapeError):
    """Raised when the weather sources could not be fetched.

    Attributes:
        url: Last URL that was attempted
        cause: One of 'timeout', 'not-found' or 'other'

    """

    cause = 'other'
    code = 'SERVICE_UNAVAILABLE'
    status_code = 503
    message = 'Weather service temporarily unavailable.'

    def __init__(self, url: str, detail: str | None = None):
        self.url = url
        super().__init__(detail or f'Upstream fetch failed for {url}')


class UpstreamTimeout(UpstreamError):
    """Raised when every attempt against the last source timed out."""

    cause = 'timeout'
    code = 'TIMEOUT'
    status_code = 504
    message = 'The weather service is taking too long. Try again later.'


class UpstreamNotFound(UpstreamError):
    """Raised when the last source answered with a 404."""

    cause = 'not-found'
    code = 'CITY_NOT_FOUND'
    status_code = 404
    message = 'City not found. Please check the spelling.'


class UpstreamUnavailable(UpstreamError):
    """Raised when all sources are exhausted for any other reason."""


class BotDetectionError(SkyscrapeError):
    """Raised when the upstream served a block or challenge page instead of weather."""

    def __init__(self, url: str, status_code: int, indicators: list[str]):
        """Initialize bot detection error.

        Args:
            url: URL where bot detection was triggered
            status_code: HTTP status code received
            indicators: List of bot detection indicators found

        """
        self.url = url
        self.http_status = status_code
        self.indicators = indicators
        super().__init__(f'Bot detection triggered on {url} (status={status_code}): {", ".join(indicators)}')


class DataNotFoundError(SkyscrapeError):
    """Raised when the page was fetched but a required field never resolved."""

    code = 'DATA_NOT_FOUND'
    status_code = 404
    message = 'Weather data not found for the specified city.'

    def __init__(self, fields: list[str]):
        self.fields = fields
        super().__init__(f'Required field(s) not found: {", ".join(fields)}')


class ParsingError(SkyscrapeError):
    """Raised when a required field was found but its value could not be trusted."""

    code = 'PARSING_ERROR'
    status_code = 503
    message = 'Unable to parse weather data. The weather service might be temporarily unavailable.'

    def __init__(self, field_name: str, raw_text: str):
        self.field_name = field_name
        self.raw_text = raw_text
        super().__init__(f"Could not parse '{field_name}' from {raw_text!r}")


class RateLimitedError(SkyscrapeError):
    """Raised when the admission gate turns a request away."""

    code = 'TOO_MANY_REQUESTS'
    status_code = 429
    message = 'Too many requests to the weather API. Please try again later.'

    def __init__(self, retry_after: int, code: str | None = None):
        self.retry_after = retry_after
        if code:
            self.code = code
        super().__init__(f'Rate limited, retry after {retry_after}s')


class CorsDeniedError(SkyscrapeError):
    """Raised when a request comes from an origin that is not allowed."""

    code = 'CORS_DENIED'
    status_code = 403
    message = 'CORS policy disallows access from this origin.'
