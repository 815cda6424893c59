#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
from datetime import date, timedelta
from typing import Any, Iterable, Mapping, Optional, Sequence

# 3rd party:

# Internal:

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'GRACE_PERIOD',
    'retention_cutoff',
    'latest_date',
    'filter_by_age'
]


GRACE_PERIOD = timedelta(days=1)


def retention_cutoff(most_recent: date, max_age_days: int) -> date:
    """
    Earliest date retained. Ages are measured from the day after
    the most recent date in the data, so ``max_age_days`` contiguous
    dates survive the filter.
    """
    if max_age_days < 0:
        raise ValueError(f"Maximum age must not be negative. Got <{max_age_days!r}> instead.")

    return most_recent + GRACE_PERIOD - timedelta(days=max_age_days)


def _is_date_keyed(view: Mapping) -> bool:
    return isinstance(next(iter(view)), date)


def _dates(view) -> Iterable[date]:
    if isinstance(view, Mapping):
        if _is_date_keyed(view):
            return iter(view)

        return (entry.test_date for series in view.values() for entry in series)

    return (entry.test_date for entry in view)


def latest_date(view) -> Optional[date]:
    if not len(view):
        return None

    return max(_dates(view), default=None)


def _filter_series(series: Sequence[Any], cutoff: date) -> list:
    return [entry for entry in series if entry.test_date >= cutoff]


def filter_by_age(view, max_age_days: int, most_recent: Optional[date] = None):
    """
    Drops every entry older than the retention window.

    Parameters
    ----------
    view
        One of:
        - a sequence of records, e.g. the flat record list;
        - a mapping keyed by date, e.g. ``by_date`` or ``aggregate_by_date``;
        - a mapping of county to series, e.g. ``by_county``.

    max_age_days: int
        Number of days retained.

    most_recent: Optional[date]
        Reference date of the window. Defaults to the most recent
        date found in ``view``. Pass the same value to every view of
        a run to keep their horizons aligned.

    Returns
    -------
    A new view of the same shape. Counties whose series are emptied
    by the filter are retained with an empty series.
    """
    if not len(view):
        return dict() if isinstance(view, Mapping) else list()

    if most_recent is None:
        most_recent = latest_date(view)

    if most_recent is None:
        return {county: list() for county in view} if isinstance(view, Mapping) else list()

    cutoff = retention_cutoff(most_recent, max_age_days)

    if not isinstance(view, Mapping):
        return _filter_series(view, cutoff)

    if _is_date_keyed(view):
        return {
            key: value
            for key, value in view.items()
            if key >= cutoff
        }

    return {
        county: _filter_series(series, cutoff)
        for county, series in view.items()
    }
