from __future__ import annotations

from typing import Dict, Type

from pydantic import BaseModel

from .image import (
    Dimensions,
    ImageMergeResult,
    ImageMetadata,
    LogoSize,
    MergeOptions,
    UploadFile,
    merge_options,
)


# Registry mapping output schema filenames to models for generation
SCHEMA_MODELS: Dict[str, Type[BaseModel]] = {
    "merge.options.schema.json": MergeOptions,
    "image.metadata.schema.json": ImageMetadata,
    "dimensions.schema.json": Dimensions,
}

__all__ = [
    "Dimensions",
    "ImageMergeResult",
    "ImageMetadata",
    "LogoSize",
    "MergeOptions",
    "UploadFile",
    "merge_options",
    "SCHEMA_MODELS",
]
