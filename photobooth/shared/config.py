import os
from typing import Optional

from pydantic import BaseModel, Field


class AppConfig(BaseModel):
    blobConnectionString: Optional[str] = None
    storageContainer: str = "photobooth"
    maxUploadBytes: int = Field(5 * 1024 * 1024, gt=0)


def get_config() -> AppConfig:
    """Read application settings from the environment.

    PUBLIC_BLOB_CONNECTION_STRING, STORAGE_CONTAINER and MAX_UPLOAD_BYTES are
    optional; unset values keep the model defaults.
    """
    values = {
        "blobConnectionString": os.getenv("PUBLIC_BLOB_CONNECTION_STRING") or None,
        "storageContainer": os.getenv("STORAGE_CONTAINER"),
        "maxUploadBytes": os.getenv("MAX_UPLOAD_BYTES"),
    }
    return AppConfig(**{k: v for k, v in values.items() if v is not None})
