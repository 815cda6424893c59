#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
from logging import getLogger
from os import environ
from typing import Any, Dict, Mapping, Optional

# 3rd party:
from orjson import loads

# Internal:
from covid_stats.config import Settings
from covid_stats.exceptions import ParameterNotFound
from covid_stats.storage import StorageClient, ResourceNotFoundError

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'ParameterStore',
    'EnvironmentParameterStore',
    'StorageParameterStore',
    'get_parameter_store'
]


logger = getLogger("covid_stats")


class ParameterStore:
    """
    Synchronous key lookup for run-time configuration.

    Names are prefixed with ``prefix`` before the lookup. Subclasses
    implement ``_lookup``, returning ``None`` when a name is unknown.
    """
    def __init__(self, prefix: str = Settings.config_prefix):
        self.prefix = prefix

    def _lookup(self, name: str) -> Optional[str]:
        raise NotImplementedError()

    def get_parameter(self, name: str) -> str:
        value = self._lookup(f"{self.prefix}{name}")

        if value is None:
            raise ParameterNotFound(name=f"{self.prefix}{name}")

        return value

    def get_secret(self, name: str) -> Dict[str, Any]:
        return loads(self.get_parameter(name))


class EnvironmentParameterStore(ParameterStore):
    def __init__(self, prefix: str = Settings.config_prefix,
                 environment: Optional[Mapping[str, str]] = None):
        super().__init__(prefix)
        self._environment = environ if environment is None else environment

    def _lookup(self, name: str) -> Optional[str]:
        return self._environment.get(name.upper())


class StorageParameterStore(ParameterStore):
    """
    Parameters held as individual blobs, one per name, under
    ``<container>/<path>/``.
    """
    def __init__(self, prefix: str = Settings.config_prefix,
                 container: str = Settings.parameters["container"],
                 path: str = Settings.parameters["path"],
                 storage_factory=StorageClient):
        super().__init__(prefix)
        self.container = container
        self.path = path.rstrip("/")
        self._storage_factory = storage_factory

    def _lookup(self, name: str) -> Optional[str]:
        kws = {
            "container": self.container,
            "path": f"{self.path}/{name}",
        }

        with self._storage_factory(**kws) as client:
            try:
                data = client.download()
            except ResourceNotFoundError:
                return None

        return data.decode().strip()


def get_parameter_store(production: bool = None) -> ParameterStore:
    if production is None:
        production = Settings.is_production()

    if production:
        return StorageParameterStore()

    return EnvironmentParameterStore()
