#!/usr/bin python3

"""
Remote fetcher
--------------

Retrieves the complete "New York State Statewide COVID-19 Testing"
dataset from its Socrata endpoint, one page at a time.

@url https://health.data.ny.gov/Health/New-York-State-Statewide-COVID-19-Testing/xdss-u53e
"""

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
from logging import getLogger
from typing import Any, Dict, Iterator, List, Optional
from urllib.parse import urlparse

# 3rd party:
from requests import Session

# Internal:
from covid_stats.config import RunConfig
from covid_stats.exceptions import FetchFailed, NotAvailable
from covid_stats.tracers import trace_method_operation
from .records import TestRecord, from_source

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'TestingDataSource',
    'fetch_all'
]


logger = getLogger("covid_stats")

API_KEY_HEADER = "X-App-Token"


class TestingDataSource:
    __test__ = False

    _name = "http"

    def __init__(self, config: RunConfig, session: Optional[Session] = None):
        self.url = config.data_url
        self.page_size = config.page_size
        self.timeout = config.timeout
        self._api_key = config.api_key
        self._session = session if session is not None else Session()
        self._account_name = urlparse(self.url).netloc or self.url

    @trace_method_operation("url", operation="GET")
    def fetch_page(self, offset: int) -> List[Dict[str, Any]]:
        response = self._session.get(
            self.url,
            headers={API_KEY_HEADER: self._api_key},
            params={"$limit": self.page_size, "$offset": offset},
            timeout=self.timeout
        )

        if not response.ok:
            raise FetchFailed(
                status_code=response.status_code,
                offset=offset,
                reason=response.reason
            )

        payload = response.json()
        logger.info(f"Fetched {len(payload)} records from offset {offset}")

        return payload

    def pages(self) -> Iterator[List[Dict[str, Any]]]:
        """
        Yields consecutive non-empty pages. The offset of each
        request is the total number of records received so far.
        """
        offset = 0

        while True:
            page = self.fetch_page(offset)

            if not len(page):
                return

            yield page
            offset += len(page)

    def fetch_all(self) -> List[TestRecord]:
        """
        Fetches and normalises the whole dataset.

        Returns
        -------
        List[TestRecord]

        Raises
        ------
        NotAvailable
            The very first page was empty.

        FetchFailed
            The remote source responded with a non-success status.
            Records received before the failure are discarded.
        """
        records = list()

        for page in self.pages():
            offset = len(records)
            records.extend(
                from_source(row, position=offset + index)
                for index, row in enumerate(page)
            )

        if not len(records):
            raise NotAvailable()

        return records


def fetch_all(config: RunConfig, session: Optional[Session] = None) -> List[TestRecord]:
    if session is not None:
        return TestingDataSource(config, session=session).fetch_all()

    with Session() as own_session:
        return TestingDataSource(config, session=own_session).fetch_all()
