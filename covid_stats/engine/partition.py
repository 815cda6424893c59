#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
from datetime import date
from logging import getLogger
from typing import Dict, Iterable, List, Optional

# 3rd party:

# Internal:
from .records import TestRecord

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'CountyGroup',
    'DateGroup',
    'by_county',
    'by_date'
]


logger = getLogger("covid_stats")

CountyGroup = Dict[str, List[TestRecord]]
DateGroup = Dict[date, List[TestRecord]]


def by_county(records: Iterable[TestRecord]) -> CountyGroup:
    """
    Groups records by county, in order of first appearance. The
    order of dates within each county is that of the input.
    """
    groups: CountyGroup = dict()

    for record in records:
        groups.setdefault(record.county, list()).append(record)

    return groups


def _find_county(entries: List[TestRecord], county: str) -> Optional[int]:
    for index, entry in enumerate(entries):
        if entry.county == county:
            return index

    return None


def by_date(records: Iterable[TestRecord], county_group: Optional[CountyGroup] = None) -> DateGroup:
    """
    Groups records by test date.

    When ``county_group`` is given, its series must already carry
    moving averages; they are copied onto the matching
    ``(test_date, county)`` entries of the date grouping.

    Parameters
    ----------
    records: Iterable[TestRecord]
        Flat list of records.

    county_group: Optional[CountyGroup]
        Output of ``by_county`` after moving averages were computed.

    Returns
    -------
    DateGroup
    """
    groups: DateGroup = dict()

    for record in records:
        groups.setdefault(record.test_date, list()).append(record)

    if county_group is None:
        return groups

    for county, series in county_group.items():
        for entry in series:
            entries = groups.get(entry.test_date, list())
            index = _find_county(entries, county)

            if index is None:
                logger.warning(
                    f"No entry for county '{county}' on {entry.test_date:%Y-%m-%d} "
                    f"in the date grouping - moving averages not copied."
                )
                continue

            entries[index] = entries[index].with_averages(
                average_tests=entry.average_tests,
                average_positives=entry.average_positives
            )

    return groups
