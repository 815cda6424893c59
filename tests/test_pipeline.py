"""
End-to-end tests of a statistics run against a fake data source
and an in-memory artifact store
"""

from datetime import date

import orjson
import pytest

from conftest import FakeSession, StorageFactory, build_source_rows, make_record
from covid_stats.engine import build_views, get_testing_data
from covid_stats.exceptions import FetchFailed, PublishFailed
from covid_stats.main import handler
from covid_stats.parameters import EnvironmentParameterStore


def parameter_store(max_age="10"):
    environment = {
        "STATS_NYS_DATA_URL": "https://health.data.ny.gov/resource/xdss-u53e.json",
        "STATS_SOCRATA_KEY": '{"key": "app-token"}',
        "ASSETS_CONTAINER": "assets",
    }
    if max_age is not None:
        environment["STATS_MAX_AGE"] = max_age

    return EnvironmentParameterStore(prefix="", environment=environment)


@pytest.fixture
def views(run_config, source_rows):
    return get_testing_data(run_config, session=FakeSession(source_rows))


def test_cross_view_consistency(views):
    assert set(views.by_date) == set(views.aggregate_by_date)
    assert {record.test_date for record in views.data} == set(views.by_date)

    county_pairs = {
        (entry.test_date, county)
        for county, series in views.by_county.items()
        for entry in series
    }
    date_pairs = {
        (test_date, entry.county)
        for test_date, entries in views.by_date.items()
        for entry in entries
    }
    assert date_pairs == county_pairs


def test_date_and_county_views_agree_on_averages(views):
    for county, series in views.by_county.items():
        for entry in series:
            (match,) = [item for item in views.by_date[entry.test_date] if item.county == county]
            assert match == entry


def test_cumulative_counters_are_non_decreasing(views):
    for series in views.by_county.values():
        for previous, current in zip(series, series[1:]):
            assert previous.test_date < current.test_date
            assert current.cumulative_positives >= previous.cumulative_positives
            assert current.cumulative_tests >= previous.cumulative_tests


def test_averages_computed_before_retention():
    records = [make_record(day, "Albany", total_tests=10 * (day + 1)) for day in range(10)]

    views = build_views(records, max_age_days=2)

    # Day 9 averages days 3..9, although only days 8 and 9 are published.
    assert [entry.test_date for entry in views.by_county["Albany"]] == [date(2020, 3, 9), date(2020, 3, 10)]
    assert views.by_county["Albany"][-1].average_tests == 70.0
    assert views.aggregate_by_date[date(2020, 3, 10)].average_tests == 70.0


def test_aggregate_by_county_is_latest_state(views):
    for county, aggregate in views.aggregate_by_county.items():
        latest = views.by_county[county][-1]
        assert aggregate.last_test_date == latest.test_date
        assert aggregate.cumulative_tests == latest.cumulative_tests


def test_handler(storage_factory):
    session = FakeSession(build_source_rows())

    res = handler(
        store=parameter_store(max_age="10"),
        session=session,
        storage_factory=storage_factory,
        export_traces=False,
    )

    assert res == {"success": True}

    by_date = orjson.loads(storage_factory.blobs[("assets", "stats-by-date.json")]["data"])
    assert len(by_date["aggregate"]) == 10
    assert set(by_date["aggregate"]) == set(by_date["dates"])
    assert max(by_date["aggregate"]) == "2020-03-30"

    by_county = orjson.loads(storage_factory.blobs[("assets", "stats-by-county.json")]["data"])
    assert sorted(by_county["counties"]) == ["Albany", "Bronx", "Cayuga"]
    assert all(len(series) == 10 for series in by_county["counties"].values())

    combined = orjson.loads(storage_factory.blobs[("assets", "stats.json")]["data"])
    assert combined == {"byDate": by_date, "byCounty": by_county}


def test_handler_default_retention(storage_factory):
    handler(
        store=parameter_store(max_age=None),
        session=FakeSession(build_source_rows(n_days=40)),
        storage_factory=storage_factory,
        export_traces=False,
    )

    by_date = orjson.loads(storage_factory.blobs[("assets", "stats-by-date.json")]["data"])
    assert len(by_date["aggregate"]) == 30


def test_handler_empty_dataset(storage_factory):
    res = handler(
        store=parameter_store(),
        session=FakeSession([]),
        storage_factory=storage_factory,
        export_traces=False,
    )

    assert res == {"success": True}
    assert orjson.loads(storage_factory.blobs[("assets", "stats.json")]["data"]) == {
        "byDate": {"aggregate": {}, "dates": {}},
        "byCounty": {"aggregate": {}, "counties": {}},
    }


def test_handler_fetch_failure_publishes_nothing(storage_factory):
    session = FakeSession(build_source_rows(), failures={90: 500})

    with pytest.raises(FetchFailed):
        handler(
            store=parameter_store(),
            session=session,
            storage_factory=storage_factory,
            export_traces=False,
        )

    assert storage_factory.blobs == {}


def test_handler_publish_failure():
    storage_factory = StorageFactory(failing={"stats-by-county.json"})

    with pytest.raises(PublishFailed):
        handler(
            store=parameter_store(),
            session=FakeSession(build_source_rows()),
            storage_factory=storage_factory,
            export_traces=False,
        )

    assert ("assets", "stats.json") in storage_factory.blobs
