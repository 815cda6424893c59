#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
import logging
from sys import stdout

# 3rd party:

# Internal:
from covid_stats.config import Settings
from covid_stats.tracers import add_azure_handler

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'start_logging',
    'add_cloud_role_name'
]


logger = logging.getLogger("covid_stats")

logging_instances = [
    [logger, logging.getLevelName(Settings.log_level.upper())],
    [logging.getLogger('azure'), logging.WARNING],
    [logging.getLogger('urllib3'), logging.WARNING],
    [logging.getLogger('requests'), logging.WARNING],
]


def add_cloud_role_name(envelope):
    envelope.tags['ai.cloud.role'] = Settings.cloud_role_name
    return True


def start_logging():
    if Settings.is_production() and Settings.instrumentation_enabled:
        add_azure_handler(
            instrumentation_key=Settings.instrumentation_key,
            cloud_role_name=add_cloud_role_name,
            logging_instances=logging_instances
        )

    if Settings.DEBUG or not Settings.is_production():
        handler = logging.StreamHandler(stdout)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

        for log, level in logging_instances:
            log.addHandler(handler)
            log.setLevel(level)

    return logger
