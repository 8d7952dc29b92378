"""
Photo compositing for event photos.

Every output is normalised onto one of two fixed content canvases, 1248x832
for landscape input and 832x1248 for portrait input. ``merge_images`` then
overlays the event logo in the bottom-right corner; ``add_white_border``
pads the canvas with a uniform border instead.
"""
from typing import Any, List, Optional

from photobooth.media.codec import PillowCodec
from photobooth.shared.logging_utils import error as log_error
from photobooth.shared.logging_utils import info as log_info
from photobooth.specs.common.errors import ImageProcessingError, ValidationError
from photobooth.specs.models.image import (
    Dimensions,
    ImageMergeResult,
    ImageMetadata,
    MergeOptions,
    MergeOverrides,
    UploadFile,
    merge_options,
)


LANDSCAPE = Dimensions(width=1248, height=832)
PORTRAIT = Dimensions(width=832, height=1248)

SUPPORTED_TYPES = ("image/jpeg", "image/png", "image/webp")

MIME_TYPES = {
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
}

# Distance in pixels between the logo and the bottom/right canvas edges.
LOGO_MARGIN = 20


def target_dimensions(width: Optional[int], height: Optional[int]) -> Dimensions:
    """Pick the content canvas; missing sizes count as 0, ties are landscape."""
    if (width or 0) >= (height or 0):
        return LANDSCAPE.model_copy()
    return PORTRAIT.model_copy()


def get_mime_type(fmt: str) -> str:
    return MIME_TYPES.get(fmt, "image/jpeg")


def _failure_message(exc: Exception) -> str:
    return str(exc) or "Unknown error"


class ImageMerger:
    def __init__(self, default_options: Optional[MergeOptions] = None, codec: Any = None):
        self.default_options = (default_options or MergeOptions()).model_copy(deep=True)
        self.codec = codec or PillowCodec()

    def validate_image_file(self, file: UploadFile) -> None:
        if not file.data:
            raise ValidationError("Image file data is empty", code="EMPTY_IMAGE")
        if file.type not in SUPPORTED_TYPES:
            raise ValidationError(
                f"Unsupported image type: {file.type}",
                code="UNSUPPORTED_IMAGE_TYPE",
                details={"allowed": list(SUPPORTED_TYPES)},
            )

    def get_image_metadata(self, file: UploadFile) -> ImageMetadata:
        return self.codec.probe(file.data)

    def merge_images(
        self,
        main_image: UploadFile,
        logo_image: UploadFile,
        options: MergeOverrides = None,
        *,
        run_trace_id: Optional[str] = None,
    ) -> ImageMergeResult:
        self.validate_image_file(main_image)
        self.validate_image_file(logo_image)
        opts = merge_options(self.default_options, options)

        opened: List[Any] = []
        try:
            canvas, target = self._prepare_canvas(main_image, opened, run_trace_id)

            logo = self.codec.decode(logo_image.data)
            opened.append(logo)
            logo = self.codec.resize(logo, opts.logoSize.width, opts.logoSize.height, fit="contain")
            opened.append(logo)

            left = max(0, target.width - opts.logoSize.width - LOGO_MARGIN)
            top = max(0, target.height - opts.logoSize.height - LOGO_MARGIN)
            merged = self.codec.composite(canvas, logo, left, top)
            opened.append(merged)

            data = self.codec.encode(merged, opts.outputFormat, opts.quality)
        except Exception as exc:
            log_error(run_trace_id, "Image merge error:", error=repr(exc))
            raise ImageProcessingError(f"Failed to merge images: {_failure_message(exc)}") from exc
        finally:
            _close_all(opened)

        return ImageMergeResult(data=data, mimeType=get_mime_type(opts.outputFormat), dimensions=target)

    def add_white_border(
        self,
        main_image: UploadFile,
        options: MergeOverrides = None,
        *,
        run_trace_id: Optional[str] = None,
    ) -> ImageMergeResult:
        self.validate_image_file(main_image)
        opts = merge_options(self.default_options, options)

        opened: List[Any] = []
        try:
            canvas, target = self._prepare_canvas(main_image, opened, run_trace_id)
            bordered = self.codec.expand(canvas, opts.borderWidth, opts.borderColor)
            opened.append(bordered)
            data = self.codec.encode(bordered, opts.outputFormat, opts.quality)
        except Exception as exc:
            log_error(run_trace_id, "Add white border error:", error=repr(exc))
            raise ImageProcessingError(f"Failed to add white border: {_failure_message(exc)}") from exc
        finally:
            _close_all(opened)

        dimensions = Dimensions(
            width=target.width + 2 * opts.borderWidth,
            height=target.height + 2 * opts.borderWidth,
        )
        return ImageMergeResult(data=data, mimeType=get_mime_type(opts.outputFormat), dimensions=dimensions)

    def _prepare_canvas(self, main_image: UploadFile, opened: List[Any], run_trace_id: Optional[str]):
        """Decode the main image and fill-resize it onto the target canvas."""
        meta = self.get_image_metadata(main_image)
        target = target_dimensions(meta.width, meta.height)
        log_info(
            run_trace_id,
            "image:canvas:selected",
            originalWidth=meta.width,
            originalHeight=meta.height,
            targetWidth=target.width,
            targetHeight=target.height,
        )

        canvas = self.codec.decode(main_image.data)
        opened.append(canvas)
        if (meta.width, meta.height) != (target.width, target.height):
            canvas = self.codec.resize(canvas, target.width, target.height, fit="fill")
            opened.append(canvas)
        return canvas, target


def _close_all(images: List[Any]) -> None:
    for img in images:
        close = getattr(img, "close", None)
        if close is not None:
            close()


def create_image_merger(default_options: Optional[MergeOptions] = None) -> ImageMerger:
    return ImageMerger(default_options=default_options)


def merge_images(
    main_image: UploadFile,
    logo_image: UploadFile,
    options: MergeOverrides = None,
    *,
    run_trace_id: Optional[str] = None,
) -> ImageMergeResult:
    return create_image_merger().merge_images(main_image, logo_image, options, run_trace_id=run_trace_id)


def add_white_border(
    main_image: UploadFile,
    options: MergeOverrides = None,
    *,
    run_trace_id: Optional[str] = None,
) -> ImageMergeResult:
    return create_image_merger().add_white_border(main_image, options, run_trace_id=run_trace_id)
