#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
from dataclasses import replace
from datetime import date
from operator import attrgetter
from typing import Dict, Sequence, TypeVar, Union

# 3rd party:

# Internal:
from covid_stats.config import MOVING_AVERAGE_DAYS
from .records import TestRecord, DateAggregate, CountyAggregate
from .partition import CountyGroup, DateGroup
from .moving_average import compute_moving_average

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'reduce_records',
    'aggregate_by_date',
    'aggregate_by_county'
]


Record = TypeVar("Record")


def reduce_records(records: Sequence[Record],
                   include_cumulatives: bool = False) -> Union[Record, Sequence[Record]]:
    """
    Reduces a sequence of records into one.

    ``new_positives`` and ``total_tests`` are summed, and so are the
    cumulative counters when ``include_cumulatives`` is set. Every
    other field is taken from the last record of the sequence.

    An empty sequence is returned unchanged.
    """
    if not isinstance(records, Sequence) or not len(records):
        return records

    totals = dict(
        new_positives=sum(item.new_positives for item in records),
        total_tests=sum(item.total_tests for item in records)
    )

    if include_cumulatives:
        totals["cumulative_positives"] = sum(item.cumulative_positives for item in records)
        totals["cumulative_tests"] = sum(item.cumulative_tests for item in records)

    return replace(records[-1], **totals)


def aggregate_by_date(date_group: DateGroup,
                      window_size: int = MOVING_AVERAGE_DAYS) -> Dict[date, DateAggregate]:
    """
    One state-wide record per date, with moving averages computed
    over the state-wide series itself.

    Counties are sorted by name before the reduction.
    """
    aggregates = list()

    for test_date, entries in date_group.items():
        if not len(entries):
            continue

        reduced: TestRecord = reduce_records(
            sorted(entries, key=attrgetter("county")),
            include_cumulatives=True
        )

        aggregates.append(
            DateAggregate(
                test_date=test_date,
                new_positives=reduced.new_positives,
                cumulative_positives=reduced.cumulative_positives,
                total_tests=reduced.total_tests,
                cumulative_tests=reduced.cumulative_tests
            )
        )

    return {
        aggregate.test_date: aggregate
        for aggregate in compute_moving_average(aggregates, window_size=window_size)
    }


def aggregate_by_county(county_group: CountyGroup) -> Dict[str, CountyAggregate]:
    """
    Latest cumulative state of every county.

    Each series must be in chronological order, as returned by
    ``compute_moving_average``; its last record is the summary.
    """
    aggregates = dict()

    for county, series in county_group.items():
        if not len(series):
            continue

        latest = series[-1]
        aggregates[county] = CountyAggregate(
            county=county,
            last_test_date=latest.test_date,
            cumulative_positives=latest.cumulative_positives,
            cumulative_tests=latest.cumulative_tests
        )

    return aggregates
