from typing import Dict, Optional

import azure.functions as func
from pydantic import ValidationError as ModelValidationError

from photobooth.media.event_logo import download_event_logo, has_event_logo
from photobooth.media.image_merger import create_image_merger
from photobooth.media.photo_finisher import finish_styled_photo
from photobooth.shared.blob_store import upload_bytes
from photobooth.shared.config import get_config
from photobooth.shared.logging_utils import error as log_error
from photobooth.shared.logging_utils import info as log_info
from photobooth.shared.logging_utils import warning as log_warning
from photobooth.shared.storage_paths import generate_ai_photo_path
from photobooth.shared.upload_validation import validate_file_or_throw, validate_file_size
from photobooth.specs.common.error_response_spec import ErrorResponse
from photobooth.specs.common.errors import (
    ConfigurationError,
    ImageProcessingError,
    StorageError,
    ValidationError,
)
from photobooth.specs.functions.compose_photo_spec import ComposePhotoRequest, StoredPhotoResponse
from photobooth.specs.models.image import Dimensions, UploadFile

bp = func.Blueprint()

@bp.route(route="compose_photo", methods=["POST"])
@bp.function_name(name="compose_photo")
def compose_photo_handler(req: func.HttpRequest) -> func.HttpResponse:
    return compose_photo_response(req)


def _error_response(message: str, status_code: int, code: Optional[str] = None, details=None) -> func.HttpResponse:
    body = ErrorResponse(message=message, error_code=code, details=details)
    return func.HttpResponse(body.model_dump_json(), status_code=status_code, mimetype="application/json")


def _resolve_logo(request: ComposePhotoRequest, run_trace_id: Optional[str]) -> Optional[UploadFile]:
    if request.logoImage is not None:
        return request.logoImage.to_upload_file()
    if not has_event_logo(request.logoPath):
        return None
    try:
        return download_event_logo(request.logoPath)
    except StorageError as exc:
        # A missing logo downgrades the request to a plain border.
        log_warning(run_trace_id, "compose_photo:logo:unavailable", logoPath=request.logoPath, error=str(exc))
        return None


def _store_photo(
    request: ComposePhotoRequest,
    output: UploadFile,
    dimensions: Optional[Dimensions],
    run_trace_id: Optional[str],
) -> StoredPhotoResponse:
    target = request.store
    stem = output.name.rsplit(".", 1)[0]
    path = generate_ai_photo_path(target.userId, target.eventId, target.sessionId, request.style, stem, output)
    url = upload_bytes(
        container=get_config().storageContainer,
        blob_name=path,
        data=output.data,
        content_type=output.type,
    )
    log_info(run_trace_id, "compose_photo:stored", path=path, size=output.size)
    return StoredPhotoResponse(
        url=url,
        path=path,
        name=output.name,
        mimeType=output.type,
        width=dimensions.width if dimensions else None,
        height=dimensions.height if dimensions else None,
    )


def compose_photo_response(req: func.HttpRequest) -> func.HttpResponse:
    run_trace_id = req.headers.get("x-trace-id")
    log_info(run_trace_id, "compose_photo:request")
    try:
        request = ComposePhotoRequest.model_validate(req.get_json())
    except ValueError as exc:
        if isinstance(exc, ModelValidationError):
            details = [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]
            return _error_response("Invalid compose request", 400, "INVALID_REQUEST", details)
        return _error_response("Request body must be JSON", 400, "INVALID_JSON")

    try:
        photo = request.mainImage.to_upload_file()
        max_size = get_config().maxUploadBytes
        if request.store is not None:
            validate_file_or_throw(photo, max_size=max_size)
        else:
            validate_file_size(photo.size, max_size)
        logo = _resolve_logo(request, run_trace_id)
        output, dimensions = finish_styled_photo(
            photo,
            request.style,
            logo,
            request.options,
            merger=create_image_merger(),
            best_effort=request.bestEffort,
            run_trace_id=run_trace_id,
        )
        stored = _store_photo(request, output, dimensions, run_trace_id) if request.store is not None else None
    except ValidationError as exc:
        return _error_response(str(exc), 400, exc.code, exc.details)
    except ImageProcessingError as exc:
        return _error_response(str(exc), 500, exc.code)
    except (StorageError, ConfigurationError) as exc:
        log_error(run_trace_id, "compose_photo:store:failed", error=str(exc))
        return _error_response(str(exc), 500, exc.code)

    if stored is not None:
        return func.HttpResponse(stored.model_dump_json(), status_code=200, mimetype="application/json")

    headers: Dict[str, str] = {"X-Image-Name": output.name}
    if dimensions is not None:
        headers["X-Image-Width"] = str(dimensions.width)
        headers["X-Image-Height"] = str(dimensions.height)
    log_info(run_trace_id, "compose_photo:completed", mimeType=output.type, size=output.size)
    return func.HttpResponse(output.data, status_code=200, mimetype=output.type, headers=headers)
