from typing import Optional

from photobooth.shared.blob_store import download_bytes
from photobooth.shared.config import get_config
from photobooth.shared.logging_utils import error as log_error
from photobooth.specs.common.errors import StorageError
from photobooth.specs.models.image import UploadFile


def has_event_logo(logo_path: Optional[str]) -> bool:
    return bool(logo_path and logo_path.strip())


def download_event_logo(logo_path: str, *, container: Optional[str] = None) -> UploadFile:
    """Fetch an event's logo from blob storage as an UploadFile."""
    container = container or get_config().storageContainer
    try:
        data, content_type = download_bytes(container=container, blob_name=logo_path)
        if not data:
            raise StorageError("Logo not found")
    except Exception as exc:
        log_error(None, "Error downloading event logo:", logoPath=logo_path, error=repr(exc))
        raise StorageError(f"Logo download failed: {str(exc) or 'Unknown error'}", details={"logoPath": logo_path}) from exc
    return UploadFile.from_bytes(name="event-logo", type=content_type or "image/png", data=data)
