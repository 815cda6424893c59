#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Dict, Optional, Union

# 3rd party:

# Internal:
from covid_stats.exceptions import InvalidRecord

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'Fields',
    'TestRecord',
    'DateAggregate',
    'CountyAggregate',
    'parse_date',
    'from_source'
]


class Fields:
    test_date = "test_date"
    county = "county"
    new_positives = "new_positives"
    cumulative_positives = "cumulative_number_of_positives"
    total_tests = "total_number_of_tests"
    cumulative_tests = "cumulative_number_of_tests"
    average_tests = "average_number_of_tests"
    average_positives = "average_new_positives"
    last_test_date = "last_test_date"


@dataclass(frozen=True)
class TestRecord:
    """
    One row of the testing dataset. The moving averages are unset
    until the record has been through ``compute_moving_average``.
    """
    __test__ = False

    test_date: date
    county: str
    new_positives: int
    cumulative_positives: int
    total_tests: int
    cumulative_tests: int
    average_tests: Optional[float] = None
    average_positives: Optional[float] = None

    def with_averages(self, average_tests: float, average_positives: float) -> 'TestRecord':
        return replace(self, average_tests=average_tests, average_positives=average_positives)

    def to_dict(self, *, include_date: bool = True, include_county: bool = True) -> Dict[str, Any]:
        payload = dict()

        if include_date:
            payload[Fields.test_date] = self.test_date

        if include_county:
            payload[Fields.county] = self.county

        payload[Fields.new_positives] = self.new_positives
        payload[Fields.cumulative_positives] = self.cumulative_positives
        payload[Fields.total_tests] = self.total_tests
        payload[Fields.cumulative_tests] = self.cumulative_tests

        if self.average_tests is not None:
            payload[Fields.average_tests] = self.average_tests
            payload[Fields.average_positives] = self.average_positives

        return payload


@dataclass(frozen=True)
class DateAggregate:
    test_date: date
    new_positives: int
    cumulative_positives: int
    total_tests: int
    cumulative_tests: int
    average_tests: Optional[float] = None
    average_positives: Optional[float] = None

    def with_averages(self, average_tests: float, average_positives: float) -> 'DateAggregate':
        return replace(self, average_tests=average_tests, average_positives=average_positives)

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            Fields.new_positives: self.new_positives,
            Fields.cumulative_positives: self.cumulative_positives,
            Fields.total_tests: self.total_tests,
            Fields.cumulative_tests: self.cumulative_tests,
        }

        if self.average_tests is not None:
            payload[Fields.average_tests] = self.average_tests
            payload[Fields.average_positives] = self.average_positives

        return payload


@dataclass(frozen=True)
class CountyAggregate:
    county: str
    last_test_date: date
    cumulative_positives: int
    cumulative_tests: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            Fields.cumulative_positives: self.cumulative_positives,
            Fields.cumulative_tests: self.cumulative_tests,
            Fields.last_test_date: self.last_test_date,
        }


def parse_date(value: Union[str, date]) -> date:
    # Socrata returns floating timestamps, e.g. "2020-03-01T00:00:00.000".
    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    return datetime.strptime(value[:10], "%Y-%m-%d").date()


def _to_int(row: Dict[str, Any], field: str, position: int) -> int:
    value = row.get(field)

    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidRecord(position=position, field=field, value=value)

    # Counters are never negative.
    if number < 0:
        raise InvalidRecord(position=position, field=field, value=value)

    return number


def from_source(row: Dict[str, Any], position: int = 0) -> TestRecord:
    """
    Normalises one row of the remote dataset, where every
    value is delivered as a string.
    """
    if not row.get(Fields.test_date) or row.get(Fields.county) is None:
        missing = Fields.test_date if not row.get(Fields.test_date) else Fields.county
        raise InvalidRecord(position=position, field=missing, value=row.get(missing))

    try:
        test_date = parse_date(row[Fields.test_date])
    except ValueError:
        raise InvalidRecord(position=position, field=Fields.test_date, value=row[Fields.test_date])

    return TestRecord(
        test_date=test_date,
        county=row[Fields.county],
        new_positives=_to_int(row, Fields.new_positives, position),
        cumulative_positives=_to_int(row, Fields.cumulative_positives, position),
        total_tests=_to_int(row, Fields.total_tests, position),
        cumulative_tests=_to_int(row, Fields.cumulative_tests, position),
    )
