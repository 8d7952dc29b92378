from typing import Dict

from photobooth.shared.upload_validation import get_ext_lower
from photobooth.specs.models.image import UploadFile


PATH_TEMPLATES = {
    "AI_PHOTO": "{userId}/{eventId}/AIPhotos/{sessionId}/{style}/{filename}.{ext}",
}


def generate_file_path(template: str, params: Dict[str, str], file: UploadFile) -> str:
    path = template
    for key, value in params.items():
        path = path.replace("{" + key + "}", value)
    return path.replace("{ext}", get_ext_lower(file.name))


def generate_ai_photo_path(
    user_id: str,
    event_id: str,
    session_id: str,
    style: str,
    filename: str,
    file: UploadFile,
) -> str:
    params = {
        "userId": user_id,
        "eventId": event_id,
        "sessionId": session_id,
        "style": style.lower(),
        "filename": filename,
    }
    return generate_file_path(PATH_TEMPLATES["AI_PHOTO"], params, file)
