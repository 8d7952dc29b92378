"""
Validation of uploaded image files.
"""
from typing import Iterable, Optional

from photobooth.specs.common.errors import ValidationError
from photobooth.specs.models.image import UploadFile


ALLOWED_TYPES = [
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/webp",
    "image/svg+xml",
    "image/x-icon",
]

ALLOWED_EXTS = ["png", "jpg", "jpeg", "webp", "svg", "ico"]

MAX_FILE_SIZE = 5 * 1024 * 1024

MIME_MAP = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
}


def get_ext_lower(filename: str) -> str:
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def infer_mime_from_filename(filename: str, fallback: str = "image/jpeg") -> str:
    return MIME_MAP.get(get_ext_lower(filename), fallback)


def validate_file_extension(filename: str, allowed_exts: Iterable[str]) -> None:
    allowed = list(allowed_exts)
    ext = get_ext_lower(filename)
    if not ext:
        raise ValidationError("File must have a valid extension", code="INVALID_FILE_NAME")
    if ext not in allowed:
        raise ValidationError(
            f"Invalid file extension. Allowed: {', '.join(allowed)}",
            code="INVALID_FILE_EXTENSION",
        )


def validate_file_type(mime_type: str, allowed_types: Iterable[str]) -> None:
    allowed = list(allowed_types)
    if mime_type not in allowed:
        raise ValidationError(
            f"Invalid file type. Allowed: {', '.join(allowed)}",
            code="INVALID_FILE_TYPE",
        )


def validate_file_size(size: int, max_size: int) -> None:
    if size > max_size:
        max_mb = max_size // (1024 * 1024)
        raise ValidationError(
            f"File too large. Maximum size is {max_mb}MB",
            code="FILE_TOO_LARGE",
            details={"size": size, "maxSize": max_size},
        )


def validate_file_or_throw(
    file: UploadFile,
    *,
    allow_types: Optional[Iterable[str]] = None,
    allow_exts: Optional[Iterable[str]] = None,
    max_size: Optional[int] = None,
) -> None:
    validate_file_extension(file.name, allow_exts if allow_exts is not None else ALLOWED_EXTS)
    validate_file_type(file.type, allow_types if allow_types is not None else ALLOWED_TYPES)
    validate_file_size(file.size, max_size if max_size is not None else MAX_FILE_SIZE)
