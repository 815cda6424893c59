#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
import logging
from os import getenv
from typing import Union, NoReturn
from gzip import compress

# 3rd party:
from azure.core.exceptions import ResourceNotFoundError
from azure.storage.blob import (
    BlobClient, BlobType, ContentSettings, StandardBlobTier
)

# Internal:
from covid_stats.tracers import trace_method_operation

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~


__all__ = [
    "StorageClient",
    "ResourceNotFoundError"
]


STORAGE_CONNECTION_STRING = getenv("DeploymentBlobStorage")

DEFAULT_CONTENT_TYPE = "application/json"
DEFAULT_CACHE_CONTROL = "no-cache, max-age=0"

logger = logging.getLogger("covid_stats")


class StorageClient:
    """
    Azure Storage client.

    Artifacts are written to private containers; access is granted to
    consumers through the storage account, never through public blobs.

    Parameters
    ----------
    container: str
        Storage container.

    path: str
        Path to the blob (excluding ``container``).

    connection_string: str
        Connection string (credentials) to access the storage unit. If not supplied,
        will look for ``DeploymentBlobStorage`` in environment variables.

    content_type: str
        Sets the MIME type of the blob via the ``Content-Type`` header - used
        for uploads only.

        Default: ``application/json``

    cache_control: str
        Sets caching rules for the blob via the ``Cache-Control`` header - used
        for uploads only.

        Default: ``no-cache, max-age=0``

    compressed: bool
        If ``True``, will compress the data using `GZip` at maximum level and
        sets ``Content-Encoding`` header for the blob to ``gzip``. If ``False``,
        it will upload the data without any compression.

        Default: ``False``

    tier: str
        Blob access tier - must be one of "Hot", "Cool", or "Archive". [Default: 'Hot']
    """
    _name = "azure blob"

    def __init__(self, container: str, path: str = str(),
                 connection_string: str = STORAGE_CONNECTION_STRING,
                 content_type: Union[str, None] = DEFAULT_CONTENT_TYPE,
                 cache_control: str = DEFAULT_CACHE_CONTROL, compressed: bool = False,
                 tier: str = 'Hot', **kwargs):
        self._path = path
        self.compressed = compressed
        self._connection_string = connection_string
        self._container_name = container
        self._tier = getattr(StandardBlobTier, tier, None)

        if self._tier is None:
            raise ValueError(
                "Tier must be one of 'Hot', 'Cool' or 'Archive'. "
                "Got <%r> instead." % tier
            )

        self._content_settings: ContentSettings = ContentSettings(
            content_type=content_type,
            cache_control=cache_control,
            content_encoding="gzip" if self.compressed else None,
            **kwargs
        )

        self.client: BlobClient = BlobClient.from_connection_string(
            conn_str=self._connection_string,
            container_name=self._container_name,
            blob_name=self._path,
            connection_timeout=60,
            max_single_put_size=256 * 1024 * 1024
        )

    @property
    def path(self):
        return self._path

    @property
    def _account_name(self):
        return f"{self._container_name}/{self._path}"

    def __enter__(self) -> 'StorageClient':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> NoReturn:
        self.client.close()

    @trace_method_operation(operation="upload")
    def upload(self, data: Union[str, bytes], overwrite: bool = True) -> NoReturn:
        """
        Uploads blob data to the storage.

        Parameters
        ----------
        data: Union[str, bytes]
            Data to be uploaded to the storage.

        overwrite: bool
            Whether to overwrite the file if it already exists. [Default: ``True``]

        Returns
        -------
        NoReturn
        """
        if isinstance(data, str):
            data = data.encode()

        if self.compressed:
            data = compress(data)

        self.client.upload_blob(
            data=data,
            blob_type=BlobType.BlockBlob,
            content_settings=self._content_settings,
            overwrite=overwrite,
            standard_blob_tier=self._tier,
            timeout=60
        )
        logger.info(f"Uploaded blob '{self._container_name}/{self.path}'")

    @trace_method_operation(operation="download")
    def download(self) -> bytes:
        data = self.client.download_blob().readall()
        logger.info(f"Downloaded blob '{self._container_name}/{self.path}'")
        return data

    def __str__(self):
        return f"Storage object for '{self._container_name}/{self.path}'"

    __repr__ = __str__
