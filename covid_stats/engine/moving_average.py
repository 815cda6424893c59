#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
from operator import attrgetter
from typing import Iterable, List, TypeVar

# 3rd party:
from pandas import DataFrame

# Internal:
from covid_stats.config import MOVING_AVERAGE_DAYS

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'compute_moving_average'
]


Entry = TypeVar("Entry")

DECIMAL_PLACES = 2


def compute_moving_average(series: Iterable[Entry],
                           window_size: int = MOVING_AVERAGE_DAYS) -> List[Entry]:
    """
    Trailing moving averages of ``new_positives`` and ``total_tests``.

    The series is first sorted by ``test_date``. The window at index
    ``i`` spans ``min(i + 1, window_size)`` entries ending at ``i``, so
    the first entries of a series are averaged over fewer days. Results
    are rounded to two decimal places.

    Parameters
    ----------
    series: Iterable[Entry]
        Entries exposing ``test_date``, ``new_positives``, ``total_tests``
        and a ``with_averages`` method.

    window_size: int
        Maximum number of entries in a window. [Default: 7]

    Returns
    -------
    List[Entry]
        New entries, in chronological order, carrying ``average_tests``
        and ``average_positives``.
    """
    if window_size < 1:
        raise ValueError(f"Window size must be a positive integer. Got <{window_size!r}> instead.")

    ordered = sorted(series, key=attrgetter("test_date"))

    if not len(ordered):
        return ordered

    df = DataFrame(
        [(entry.new_positives, entry.total_tests) for entry in ordered],
        columns=["new_positives", "total_tests"],
        dtype=float
    )

    averages = (
        df
        .rolling(window=window_size, min_periods=1)
        .mean()
        .round(DECIMAL_PLACES)
    )

    return [
        entry.with_averages(
            average_tests=float(total_tests),
            average_positives=float(new_positives)
        )
        for entry, new_positives, total_tests in zip(
            ordered,
            averages["new_positives"],
            averages["total_tests"]
        )
    ]
