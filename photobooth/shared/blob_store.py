from typing import Optional, Tuple

import backoff
from azure.core.exceptions import (
    HttpResponseError,
    ResourceExistsError,
    ResourceNotFoundError,
    ServiceRequestError,
)
from azure.storage.blob import BlobServiceClient, ContentSettings

from photobooth.shared.config import get_config
from photobooth.specs.common.errors import ConfigurationError, StorageError


MAX_RETRIES = 3
OPERATION_TIMEOUT = 30  # seconds


def _get_service_client() -> BlobServiceClient:
    conn = get_config().blobConnectionString
    if not conn:
        raise ConfigurationError("PUBLIC_BLOB_CONNECTION_STRING is required for blob storage")
    return BlobServiceClient.from_connection_string(conn)


@backoff.on_exception(
    backoff.expo,
    ServiceRequestError,
    max_tries=MAX_RETRIES,
    max_time=OPERATION_TIMEOUT,
)
def upload_bytes(
    *,
    container: str,
    blob_name: str,
    data: bytes,
    content_type: Optional[str] = None,
) -> str:
    """Upload bytes to blob storage, return the blob URL.

    Uses PUBLIC_BLOB_CONNECTION_STRING. Creates container if missing.
    Service errors are raised as StorageError.
    """
    service = _get_service_client()
    container_client = service.get_container_client(container)
    try:
        container_client.create_container(public_access="blob")
    except ResourceExistsError:
        pass
    blob = container_client.get_blob_client(blob_name)
    kwargs = {}
    if content_type:
        kwargs["content_settings"] = ContentSettings(content_type=content_type)
    try:
        blob.upload_blob(data, overwrite=True, **kwargs)
    except HttpResponseError as exc:
        raise StorageError(f"Blob upload failed: {exc.message or exc}", details={"container": container}) from exc
    return blob.url


@backoff.on_exception(
    backoff.expo,
    ServiceRequestError,
    max_tries=MAX_RETRIES,
    max_time=OPERATION_TIMEOUT,
)
def download_bytes(*, container: str, blob_name: str) -> Tuple[bytes, Optional[str]]:
    """Download a blob, returning its bytes and stored content type.

    Transport failures are retried with exponential backoff; a missing blob
    raises StorageError straight away.
    """
    service = _get_service_client()
    blob = service.get_blob_client(container=container, blob=blob_name)
    try:
        downloader = blob.download_blob()
    except ResourceNotFoundError as exc:
        raise StorageError(f"Blob '{blob_name}' not found", details={"container": container}) from exc
    content_type = None
    settings = getattr(downloader.properties, "content_settings", None)
    if settings is not None:
        content_type = settings.content_type
    return downloader.readall(), content_type
