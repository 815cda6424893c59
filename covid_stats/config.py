#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
from dataclasses import dataclass
from logging import getLogger
from os import getenv

# 3rd party:

# Internal:
from covid_stats.exceptions import ParameterNotFound

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'Settings',
    'RunConfig',
    'DEFAULT_MAX_AGE_DAYS',
    'DEFAULT_PAGE_SIZE',
    'MOVING_AVERAGE_DAYS'
]


logger = getLogger("covid_stats")


DEFAULT_MAX_AGE_DAYS = 30
DEFAULT_PAGE_SIZE = 10_000  # Records per request
MOVING_AVERAGE_DAYS = 7
REQUEST_TIMEOUT = 60  # seconds


@dataclass
class Settings:
    ENVIRONMENT = getenv("STATS_ENV", "PRODUCTION")
    DEBUG = getenv("IS_DEV", "0") == "1"
    instrumentation_key = f'InstrumentationKey={getenv("APPINSIGHTS_INSTRUMENTATIONKEY", "")}'
    instrumentation_enabled = bool(getenv("APPINSIGHTS_INSTRUMENTATIONKEY"))
    log_level = getenv("LOG_LEVEL", "INFO")
    cloud_role_name = getenv("WEBSITE_SITE_NAME", "stats-job")
    config_prefix = getenv("CONFIG_VAR_PREFIX", str())
    parameters = {
        "container": "pipeline",
        "path": "config/parameters"
    }
    artifacts = {
        "by_county": "stats-by-county.json",
        "by_date": "stats-by-date.json",
        "combined": "stats.json"
    }

    @classmethod
    def is_production(cls) -> bool:
        return cls.ENVIRONMENT.strip().upper() != "DEVELOPMENT"


@dataclass(frozen=True)
class RunConfig:
    """
    Configuration for a single run of the statistics job.

    Built once at the start of a run and handed to every component
    that needs it, so nothing is read from ambient state mid-run.
    """
    data_url: str
    api_key: str
    container: str
    max_age_days: int = DEFAULT_MAX_AGE_DAYS
    page_size: int = DEFAULT_PAGE_SIZE
    moving_average_days: int = MOVING_AVERAGE_DAYS
    timeout: int = REQUEST_TIMEOUT

    @classmethod
    def from_store(cls, store, production: bool = None) -> 'RunConfig':
        """
        Resolves the run configuration from a parameter store.

        Parameters
        ----------
        store: ParameterStore
            Store used for every lookup.

        production: bool
            In production, the data source and its key are read as
            parameters and secrets. Locally, they are read from the
            ``NYS_STATS``, ``SOCRATA_KEY`` and ``ASSETS_CONTAINER``
            environment variables. [Default: ``Settings.is_production()``]

        Returns
        -------
        RunConfig
        """
        if production is None:
            production = Settings.is_production()

        if production:
            data_url = store.get_parameter("stats_nys_data_url")
            api_key = store.get_secret("stats_socrata_key")["key"]
            container = store.get_parameter("assets_container")
        else:
            data_url = getenv("NYS_STATS", str())
            api_key = getenv("SOCRATA_KEY", str())
            container = getenv("ASSETS_CONTAINER", "assets")

        return cls(
            data_url=data_url,
            api_key=api_key,
            container=container,
            max_age_days=get_max_age(store)
        )


def get_max_age(store) -> int:
    try:
        value = store.get_parameter("stats_max_age")
    except ParameterNotFound as err:
        logger.info(f"{err.message} Using the default of {DEFAULT_MAX_AGE_DAYS} days.")
        return DEFAULT_MAX_AGE_DAYS

    try:
        max_age = int(str(value).strip())
    except ValueError:
        max_age = 0

    if max_age <= 0:
        logger.warning(
            f"Invalid value for 'stats_max_age': {value!r}. "
            f"Using the default of {DEFAULT_MAX_AGE_DAYS} days."
        )
        return DEFAULT_MAX_AGE_DAYS

    return max_age
