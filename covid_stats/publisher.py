#!/usr/bin python3

"""
Publisher
---------

Serialises the statistics views into the JSON documents consumed by
the dashboard and uploads them to the assets container.

- ``stats-by-county.json``: ``{"aggregate": ..., "counties": ...}``
- ``stats-by-date.json``: ``{"aggregate": ..., "dates": ...}``
- ``stats.json``: both of the above under ``byCounty`` and ``byDate``.
"""

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
from logging import getLogger
from typing import Any, Dict, List

# 3rd party:
from azure.core.exceptions import AzureError
from orjson import dumps, OPT_INDENT_2, OPT_NON_STR_KEYS

# Internal:
from covid_stats.config import Settings
from covid_stats.engine import StatsViews
from covid_stats.exceptions import PublishFailed
from covid_stats.storage import StorageClient

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'format_by_county',
    'format_by_date',
    'format_combined',
    'serialise',
    'publish'
]


logger = getLogger("covid_stats")

CONTENT_TYPE = "application/json"


def format_by_county(views: StatsViews) -> Dict[str, Any]:
    return {
        "aggregate": {
            county: aggregate.to_dict()
            for county, aggregate in views.aggregate_by_county.items()
        },
        "counties": {
            county: [entry.to_dict(include_county=False) for entry in series]
            for county, series in views.by_county.items()
        }
    }


def format_by_date(views: StatsViews) -> Dict[str, Any]:
    return {
        "aggregate": {
            test_date: aggregate.to_dict()
            for test_date, aggregate in views.aggregate_by_date.items()
        },
        "dates": {
            test_date: [entry.to_dict(include_date=False) for entry in entries]
            for test_date, entries in views.by_date.items()
        }
    }


def format_combined(views: StatsViews) -> Dict[str, Any]:
    return {
        "byDate": format_by_date(views),
        "byCounty": format_by_county(views)
    }


def serialise(document: Dict[str, Any]) -> bytes:
    # Date keys are exported as ISO 8601 strings.
    return dumps(document, option=OPT_INDENT_2 | OPT_NON_STR_KEYS)


def publish(views: StatsViews, container: str, storage_factory=StorageClient) -> List[str]:
    """
    Uploads the three documents, in order.

    Every document is attempted even if an earlier upload fails;
    documents already uploaded are left in place.

    Returns
    -------
    List[str]
        Paths of the uploaded documents.

    Raises
    ------
    PublishFailed
        One or more documents could not be uploaded.
    """
    documents = [
        (Settings.artifacts["by_county"], format_by_county),
        (Settings.artifacts["by_date"], format_by_date),
        (Settings.artifacts["combined"], format_combined),
    ]

    published, failed = list(), list()

    for path, formatter in documents:
        kws = {
            "container": container,
            "path": path,
            "content_type": CONTENT_TYPE,
            "compressed": False
        }

        payload = serialise(formatter(views))

        try:
            with storage_factory(**kws) as client:
                client.upload(payload)
        except AzureError as err:
            logger.exception(f"Failed to publish '{container}/{path}': {err}")
            failed.append(path)
            continue

        published.append(path)

    if len(failed):
        raise PublishFailed(paths=failed)

    return published
