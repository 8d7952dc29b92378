from typing import Optional, Tuple

from photobooth.media.image_merger import ImageMerger, create_image_merger
from photobooth.shared.logging_utils import info as log_info
from photobooth.shared.logging_utils import warning as log_warning
from photobooth.specs.common.errors import ImageProcessingError
from photobooth.specs.models.image import Dimensions, MergeOverrides, UploadFile


_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


def output_stem(style: str, has_logo: bool) -> str:
    return f"{style.lower()}-{'merged' if has_logo else 'bordered'}"


def output_name(style: str, has_logo: bool, mime_type: str) -> str:
    """File name for a finished photo; the extension follows the encoded type."""
    return f"{output_stem(style, has_logo)}.{_EXTENSIONS.get(mime_type, 'jpg')}"


def finish_styled_photo(
    photo: UploadFile,
    style: str,
    logo: Optional[UploadFile] = None,
    options: MergeOverrides = None,
    *,
    merger: Optional[ImageMerger] = None,
    best_effort: bool = True,
    run_trace_id: Optional[str] = None,
) -> Tuple[UploadFile, Optional[Dimensions]]:
    """Brand a generated photo before it is stored.

    With an event logo the logo is merged onto the photo, otherwise a white
    border is added. Returns the finished file and its pixel dimensions.

    In best-effort mode a processing failure is logged and the photo is
    returned untouched with no dimensions, so the upload can still go ahead.
    Otherwise the ImageProcessingError propagates.
    """
    merger = merger or create_image_merger()
    has_logo = logo is not None
    try:
        if has_logo:
            result = merger.merge_images(photo, logo, options, run_trace_id=run_trace_id)
        else:
            result = merger.add_white_border(photo, options, run_trace_id=run_trace_id)
    except ImageProcessingError as exc:
        if not best_effort:
            raise
        log_warning(run_trace_id, "photo:finish:failed", style=style, hasLogo=has_logo, error=str(exc))
        return photo, None

    log_info(
        run_trace_id,
        "photo:finish:completed",
        style=style,
        hasLogo=has_logo,
        width=result.dimensions.width,
        height=result.dimensions.height,
    )
    return result.to_upload_file(output_name(style, has_logo, result.mimeType)), result.dimensions
