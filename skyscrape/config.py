"""Runtime configuration loaded from environment variables.

Settings are read once at startup and frozen. A change requires a restart.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from skyscrape.exceptions import ConfigurationError
from skyscrape.models import SelectorConfig

logger = logging.getLogger(__name__)

# Environment variable holding the primary selector of each logical field
SELECTOR_ENV_VARS: dict[str, str] = {
    'temperature': 'TEMPERATURE_CLASS',
    'min_max_temperature': 'MIN_MAX_TEMPERATURE_CLASS',
    'humidity_pressure': 'HUMIDITY_PRESSURE_CLASS',
    'condition': 'CONDITION_CLASS',
    'date': 'DATE_CLASS',
}

# Optional overrides of the built-in fallback selectors
FALLBACK_ENV_VARS: dict[str, str] = {
    name: var.replace('_CLASS', '_FALLBACK_CLASS') for name, var in SELECTOR_ENV_VARS.items()
}

REQUIRED_ENV_VARS: tuple[str, ...] = (
    'SCRAPE_API_FIRST',
    'SCRAPE_API_LAST',
    'SCRAPE_API_FALLBACK',
    *SELECTOR_ENV_VARS.values(),
)


class SourceConfig(BaseModel):
    """URL templates for the primary and fallback weather sources.

    Attributes:
        primary_prefix: Text placed before the city key in the primary URL
        primary_suffix: Text placed after the city key in the primary URL
        fallback_prefix: Text placed before the city key in the fallback URL

    """

    model_config = ConfigDict(frozen=True)

    primary_prefix: str
    primary_suffix: str = ''
    fallback_prefix: str

    def primary_url(self, city_key: str) -> str:
        return f'{self.primary_prefix}{city_key}{self.primary_suffix}'

    def fallback_url(self, city_key: str) -> str:
        return f'{self.fallback_prefix}{city_key}'


class MailConfig(BaseModel):
    """SMTP settings for operator alerts. Alerting is disabled when incomplete."""

    model_config = ConfigDict(frozen=True)

    admin_email: str | None = None
    user: str | None = None
    password: str | None = Field(default=None, repr=False)
    host: str = 'smtp.gmail.com'
    port: int = 465

    @property
    def enabled(self) -> bool:
        return bool(self.admin_email and self.user and self.password)


class Settings(BaseModel):
    """Process-wide, immutable settings.

    Attributes:
        sources: Primary and fallback URL templates
        selectors: Selector configuration for every logical field
        mail: SMTP settings for selector alerts
        port: Port the API server listens on
        recent_search_limit: Number of recent searches the frontend keeps
        api_url: Public base URL of the API, handed to the frontend
        allowed_origins: Origins allowed to call the API; empty allows all
        fetch_timeout: Per-request timeout in seconds
        fetch_retries: Attempts per source before giving up on it
        fetch_backoff: Base of the linear backoff between attempts, in seconds
        selector_check_interval: Seconds between selector health checks
        selector_check_city: Reference city probed by the health check
        selector_check_enabled: Whether the health monitor runs with the server
        log_level: Level for the root logger

    """

    model_config = ConfigDict(frozen=True)

    sources: SourceConfig
    selectors: SelectorConfig
    mail: MailConfig = Field(default_factory=MailConfig)
    port: int = 5000
    recent_search_limit: int = 5
    api_url: str | None = None
    allowed_origins: tuple[str, ...] = ()
    fetch_timeout: float = 5.0
    fetch_retries: int = Field(default=3, ge=1)
    fetch_backoff: float = Field(default=0.3, ge=0)
    selector_check_interval: float = Field(default=24 * 60 * 60, gt=0)
    selector_check_city: str = 'delhi'
    selector_check_enabled: bool = True
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> 'Settings':
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            Validated, frozen settings

        Raises:
            ConfigurationError: If any required variable is missing or empty

        """
        env = os.environ if environ is None else environ

        missing = [name for name in REQUIRED_ENV_VARS if not env.get(name)]
        if missing:
            raise ConfigurationError(missing)

        primary = {name: env[var] for name, var in SELECTOR_ENV_VARS.items()}
        fallback = {name: env[var] for name, var in FALLBACK_ENV_VARS.items() if env.get(var)}

        optional: dict[str, object] = {}
        for field_name, var in (
            ('port', 'PORT'),
            ('recent_search_limit', 'RECENT_SEARCH_LIMIT'),
            ('api_url', 'API_URL'),
            ('fetch_timeout', 'FETCH_TIMEOUT'),
            ('fetch_retries', 'FETCH_RETRIES'),
            ('fetch_backoff', 'FETCH_BACKOFF'),
            ('selector_check_interval', 'SELECTOR_CHECK_INTERVAL'),
            ('selector_check_city', 'SELECTOR_CHECK_CITY'),
            ('selector_check_enabled', 'SELECTOR_CHECK_ENABLED'),
            ('log_level', 'LOG_LEVEL'),
        ):
            if env.get(var):
                optional[field_name] = env[var]

        mail = MailConfig(
            admin_email=env.get('ADMIN_EMAIL') or None,
            user=env.get('MAIL_USER') or None,
            password=env.get('MAIL_PASS') or None,
            **{k: v for k, v in (('host', env.get('MAIL_HOST')), ('port', env.get('MAIL_PORT'))) if v},
        )

        return cls(
            sources=SourceConfig(
                primary_prefix=env['SCRAPE_API_FIRST'],
                primary_suffix=env['SCRAPE_API_LAST'],
                fallback_prefix=env['SCRAPE_API_FALLBACK'],
            ),
            selectors=SelectorConfig.from_primary(primary, fallback),
            mail=mail,
            allowed_origins=_allowed_origins(env),
            **optional,
        )


def _allowed_origins(env: Mapping[str, str]) -> tuple[str, ...]:
    origins = [origin.strip() for origin in env.get('ALLOWED_ORIGINS', '').split(',')]
    origins += [env.get(name, '') for name in ('ALLOWED_ORIGIN', 'ALLOWED_ORIGIN2', 'ALLOWED_ORIGIN3', 'ALLOWED_ORIGIN4')]
    return tuple(dict.fromkeys(origin for origin in origins if origin))


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Load ``.env`` (or ``.env.example`` when there is none) and build settings.

    Args:
        env_file: Explicit dotenv file to load instead of the defaults

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If any required variable is missing

    """
    if env_file is not None:
        load_dotenv(env_file)
    elif not load_dotenv():
        example = Path.cwd() / '.env.example'
        if example.exists():
            load_dotenv(example)
            logger.warning('Using .env.example for environment variables. Create a .env file for production.')

    return Settings.from_env()
