#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
import logging
from typing import Dict, Optional

# 3rd party:
from requests import Session

# Internal:
from covid_stats.config import Settings, RunConfig
from covid_stats.engine import get_testing_data
from covid_stats.parameters import ParameterStore, get_parameter_store
from covid_stats.publisher import publish
from covid_stats.startup import add_cloud_role_name
from covid_stats.storage import StorageClient
from covid_stats.tracers import trace_run

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'handler'
]


logger = logging.getLogger("covid_stats")


def handler(store: Optional[ParameterStore] = None, session: Optional[Session] = None,
            storage_factory=StorageClient, export_traces: Optional[bool] = None) -> Dict[str, bool]:
    """
    Runs the statistics job once: fetch, aggregate and publish.

    Nothing is published when fetching or aggregation fails.
    """
    if store is None:
        store = get_parameter_store()

    if export_traces is None:
        export_traces = Settings.is_production() and Settings.instrumentation_enabled

    config = RunConfig.from_store(store)
    logger.info(f"Retaining {config.max_age_days} days of testing data")

    extra_attrs = dict(
        environment=Settings.ENVIRONMENT,
        container=config.container
    )

    with trace_run("stats", Settings.instrumentation_key, add_cloud_role_name,
                   extra_attrs=extra_attrs, export=export_traces):
        views = get_testing_data(config, session=session)
        published = publish(views, config.container, storage_factory=storage_factory)

    logger.info(f"Published {len(published)} artifacts to '{config.container}'")

    return {"success": True}
