"""
Tests of `covid_stats.engine.partition`
"""

import logging
from datetime import date

from conftest import make_record
from covid_stats.engine.moving_average import compute_moving_average
from covid_stats.engine.partition import by_county, by_date


def test_by_county_groups_in_order_of_first_appearance():
    records = [
        make_record(1, "Bronx"),
        make_record(0, "Albany"),
        make_record(0, "Bronx"),
        make_record(1, "Albany"),
    ]

    res = by_county(records)

    assert list(res) == ["Bronx", "Albany"]
    assert res["Bronx"] == [records[0], records[2]]
    assert res["Albany"] == [records[1], records[3]]


def test_by_date_without_county_group():
    records = [
        make_record(0, "Albany"),
        make_record(0, "Bronx"),
        make_record(1, "Albany"),
    ]

    res = by_date(records)

    assert list(res) == [date(2020, 3, 1), date(2020, 3, 2)]
    assert [entry.county for entry in res[date(2020, 3, 1)]] == ["Albany", "Bronx"]
    assert all(entry.average_tests is None for entries in res.values() for entry in entries)


def test_by_date_copies_moving_averages():
    records = [
        make_record(0, "Albany", total_tests=100, new_positives=1),
        make_record(0, "Bronx", total_tests=10, new_positives=4),
        make_record(1, "Albany", total_tests=200, new_positives=3),
        make_record(1, "Bronx", total_tests=30, new_positives=0),
    ]
    county_group = {
        county: compute_moving_average(series)
        for county, series in by_county(records).items()
    }

    res = by_date(records, county_group)

    day_two = {entry.county: entry for entry in res[date(2020, 3, 2)]}
    assert day_two["Albany"].average_tests == 150.0
    assert day_two["Albany"].average_positives == 2.0
    assert day_two["Bronx"].average_tests == 20.0
    assert day_two["Bronx"].average_positives == 2.0

    # The flat records are left untouched.
    assert all(record.average_tests is None for record in records)


def test_by_date_skips_missing_match(caplog):
    records = [make_record(0, "Albany", total_tests=100)]
    county_group = {
        "Albany": compute_moving_average(records),
        "Bronx": compute_moving_average([make_record(0, "Bronx", total_tests=5)]),
    }

    with caplog.at_level(logging.WARNING, logger="covid_stats"):
        res = by_date(records, county_group)

    assert [entry.county for entry in res[date(2020, 3, 1)]] == ["Albany"]
    assert res[date(2020, 3, 1)][0].average_tests == 100.0
    assert "No entry for county 'Bronx' on 2020-03-01" in caplog.text
