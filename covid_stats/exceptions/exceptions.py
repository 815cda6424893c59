#!/usr/bin python3

"""
Exceptions for the statistics job
---------------------------------

Objects in this module contain a ``message`` property that provides
additional information on the failure, generated from a template and
the keyword arguments given to the exception.

Errors raised whilst fetching or aggregating the data are fatal to
the run and nothing is published. ``NotAvailable`` and a missing
retention parameter are recovered by the pipeline.
"""

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
from string import Template
from typing import Iterable

# 3rd party:

# Internal:

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Header
__license__ = "MIT"
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'StatsException',
    'FetchFailed',
    'NotAvailable',
    'InvalidRecord',
    'ParameterNotFound',
    'PublishFailed'
]


class StatsException(Exception):
    message = str()

    def __init__(self, *args, **kwargs):
        self.message = Template(self.message).substitute(**kwargs)
        super().__init__(self.message, *args)


class FetchFailed(StatsException):
    message = (
        "Request for testing data at offset $offset failed with "
        "status code $status_code: $reason"
    )

    def __init__(self, *, status_code: int, offset: int, reason: str = str()):
        self.status_code = status_code
        self.offset = offset
        super().__init__(status_code=status_code, offset=offset, reason=reason or "N/A")


class NotAvailable(StatsException):
    message = (
        "The request was fulfilled. There is currently no data available."
    )


class InvalidRecord(StatsException):
    message = (
        "Invalid record at position $position: unexpected value "
        "'$value' for field '$field'."
    )

    def __init__(self, *, position: int, field: str, value):
        super().__init__(position=position, field=field, value=value)


class ParameterNotFound(StatsException):
    message = "Parameter '$name' could not be found."

    def __init__(self, *, name: str):
        self.name = name
        super().__init__(name=name)


class PublishFailed(StatsException):
    message = (
        "Failed to publish $total artifact(s): $paths. Artifacts that "
        "were already published have not been rolled back."
    )

    def __init__(self, *, paths: Iterable[str]):
        self.paths = list(paths)
        super().__init__(total=len(self.paths), paths=", ".join(self.paths))
