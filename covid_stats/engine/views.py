#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
from dataclasses import dataclass, field
from datetime import date
from logging import getLogger
from typing import Dict, List, Optional, Sequence

# 3rd party:
from requests import Session

# Internal:
from covid_stats.config import RunConfig, MOVING_AVERAGE_DAYS
from covid_stats.exceptions import NotAvailable
from .records import TestRecord, DateAggregate, CountyAggregate
from .fetcher import fetch_all
from .partition import CountyGroup, DateGroup, by_county, by_date
from .moving_average import compute_moving_average
from .aggregation import aggregate_by_date, aggregate_by_county
from .retention import filter_by_age, latest_date

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'StatsViews',
    'build_views',
    'get_testing_data'
]


logger = getLogger("covid_stats")


@dataclass(frozen=True)
class StatsViews:
    data: List[TestRecord] = field(default_factory=list)
    by_date: DateGroup = field(default_factory=dict)
    by_county: CountyGroup = field(default_factory=dict)
    aggregate_by_date: Dict[date, DateAggregate] = field(default_factory=dict)
    aggregate_by_county: Dict[str, CountyAggregate] = field(default_factory=dict)

    def filter_by_age(self, max_age_days: int, most_recent: Optional[date] = None) -> 'StatsViews':
        """
        Applies the retention window to the flat list, both date views
        and every county series, measured from one reference date.
        ``aggregate_by_county`` describes the latest state and is kept.
        """
        if most_recent is None:
            most_recent = latest_date(self.data)

        if most_recent is None:
            return self

        return StatsViews(
            data=filter_by_age(self.data, max_age_days, most_recent),
            by_date=filter_by_age(self.by_date, max_age_days, most_recent),
            by_county=filter_by_age(self.by_county, max_age_days, most_recent),
            aggregate_by_date=filter_by_age(self.aggregate_by_date, max_age_days, most_recent),
            aggregate_by_county=dict(self.aggregate_by_county)
        )


def build_views(records: Sequence[TestRecord], max_age_days: int,
                window_size: int = MOVING_AVERAGE_DAYS) -> StatsViews:
    county_group = {
        county: compute_moving_average(series, window_size=window_size)
        for county, series in by_county(records).items()
    }

    date_group = by_date(records, county_group)
    date_group = dict(sorted(date_group.items()))

    views = StatsViews(
        data=list(records),
        by_date=date_group,
        by_county=county_group,
        aggregate_by_date=aggregate_by_date(date_group, window_size=window_size),
        aggregate_by_county=aggregate_by_county(county_group)
    )

    return views.filter_by_age(max_age_days)


def get_testing_data(config: RunConfig, session: Optional[Session] = None) -> StatsViews:
    """
    Testing data for the state of NY, grouped by date and by county,
    with state-wide aggregates by date and latest totals by county.
    """
    try:
        records = fetch_all(config, session=session)
    except NotAvailable as err:
        logger.warning(err.message)
        records = list()

    logger.info(f"Building statistics from {len(records)} records")

    return build_views(
        records,
        max_age_days=config.max_age_days,
        window_size=config.moving_average_days
    )
