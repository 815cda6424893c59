"""
Re-useable fixtures for tests

See https://docs.pytest.org/en/7.1.x/reference/fixtures.html#conftest-py-sharing-fixtures-across-multiple-files
"""

from datetime import date, timedelta

import pytest
from azure.core.exceptions import AzureError, ResourceNotFoundError

from covid_stats.config import RunConfig
from covid_stats.engine.records import TestRecord

START_DATE = date(2020, 3, 1)
COUNTIES = ("Albany", "Bronx", "Cayuga")


def make_record(day, county="Albany", new_positives=0, total_tests=0,
                cumulative_positives=0, cumulative_tests=0):
    if isinstance(day, int):
        day = START_DATE + timedelta(days=day)

    return TestRecord(
        test_date=day,
        county=county,
        new_positives=new_positives,
        cumulative_positives=cumulative_positives,
        total_tests=total_tests,
        cumulative_tests=cumulative_tests,
    )


def source_row(day, county, new_positives, cumulative_positives, total_tests, cumulative_tests):
    test_date = START_DATE + timedelta(days=day)

    return {
        "test_date": f"{test_date:%Y-%m-%d}T00:00:00.000",
        "county": county,
        "new_positives": str(new_positives),
        "cumulative_number_of_positives": str(cumulative_positives),
        "total_number_of_tests": str(total_tests),
        "cumulative_number_of_tests": str(cumulative_tests),
    }


def build_source_rows(n_days=30, counties=COUNTIES):
    rows = list()
    for county_index, county in enumerate(counties):
        cumulative_positives, cumulative_tests = 0, 0
        for day in range(n_days):
            new_positives = (day * (county_index + 1)) % 11
            total_tests = 100 + 10 * day + county_index
            cumulative_positives += new_positives
            cumulative_tests += total_tests
            rows.append(
                source_row(
                    day, county, new_positives, cumulative_positives,
                    total_tests, cumulative_tests
                )
            )

    # Arrival order from the source is not chronological.
    rows.sort(key=lambda row: (row["test_date"][8:10], row["county"]), reverse=True)
    return rows


class FakeResponse:
    def __init__(self, payload, status_code=200, reason="OK"):
        self._payload = payload
        self.status_code = status_code
        self.reason = reason

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return self._payload


class FakeSession:
    """
    Serves ``rows`` in pages of ``limit`` records. Requests at an
    offset listed in ``failures`` are answered with that status code.
    """

    def __init__(self, rows, failures=None):
        self.rows = list(rows)
        self.failures = failures or dict()
        self.calls = list()
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self.closed = True

    def get(self, url, headers=None, params=None, timeout=None):
        self.calls.append(dict(url=url, headers=headers, params=params, timeout=timeout))
        offset, limit = params["$offset"], params["$limit"]

        if offset in self.failures:
            return FakeResponse(None, status_code=self.failures[offset], reason="Server Error")

        return FakeResponse(self.rows[offset: offset + limit])


class FakeStorage:
    """
    In-memory stand-in for ``StorageClient``. Blobs are shared by
    every instance created from the same factory.
    """

    def __init__(self, blobs, failing, container, path=str(), **kwargs):
        self._blobs = blobs
        self._failing = failing
        self.container = container
        self.path = path
        self.kwargs = kwargs

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return None

    def upload(self, data, overwrite=True):
        if self.path in self._failing:
            raise AzureError(f"Upload of {self.path} rejected")

        self._blobs[(self.container, self.path)] = dict(data=data, **self.kwargs)

    def download(self):
        try:
            return self._blobs[(self.container, self.path)]["data"]
        except KeyError:
            raise ResourceNotFoundError(f"{self.container}/{self.path} does not exist")


class StorageFactory:
    def __init__(self, failing=()):
        self.blobs = dict()
        self.failing = set(failing)

    def __call__(self, container, path=str(), **kwargs):
        return FakeStorage(self.blobs, self.failing, container, path, **kwargs)


@pytest.fixture
def run_config():
    return RunConfig(
        data_url="https://health.data.ny.gov/resource/xdss-u53e.json",
        api_key="app-token",
        container="assets",
        max_age_days=30,
        page_size=10,
    )


@pytest.fixture
def source_rows():
    return build_source_rows()


@pytest.fixture
def storage_factory():
    return StorageFactory()
