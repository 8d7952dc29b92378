#!/usr/bin/env python3
"""
Generate JSON Schemas, YAML variants, and OpenAPI from Pydantic models.

Outputs under photobooth/specs/:
 - schemas/*.json (and *.yaml)
 - openapi.yaml and openapi.json
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import yaml


ROOT = Path(__file__).resolve().parents[1]
SPECS = ROOT / "photobooth" / "specs"
SCHEMAS_DIR = SPECS / "schemas"

sys.path.insert(0, str(ROOT))

from photobooth.specs.models import SCHEMA_MODELS  # noqa: E402
from photobooth.specs.common.error_response_spec import ErrorResponse  # noqa: E402
from photobooth.specs.functions.compose_photo_spec import (  # noqa: E402
    ComposePhotoRequest,
    ImagePayload,
    StoredPhotoResponse,
)


REQUEST_MODELS = {
    "compose_photo.request.schema.json": ComposePhotoRequest,
    "image.payload.schema.json": ImagePayload,
    "compose_photo.stored.schema.json": StoredPhotoResponse,
    "error.response.schema.json": ErrorResponse,
}


def write_json_yaml(obj: dict, json_path: Path) -> None:
    json_path.parent.mkdir(parents=True, exist_ok=True)
    with json_path.open("w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)
    yaml_path = json_path.with_suffix(".yaml")
    with yaml_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def generate_model_schemas() -> None:
    for filename, model in {**SCHEMA_MODELS, **REQUEST_MODELS}.items():
        schema = model.model_json_schema()
        write_json_yaml(schema, SCHEMAS_DIR / filename)


def build_openapi() -> dict:
    components = {
        "schemas": {
            "ComposePhotoRequest": ComposePhotoRequest.model_json_schema(),
            "StoredPhotoResponse": StoredPhotoResponse.model_json_schema(),
            "ErrorResponse": ErrorResponse.model_json_schema(),
        }
    }
    error_content = {"application/json": {"schema": {"$ref": "#/components/schemas/ErrorResponse"}}}

    return {
        "openapi": "3.0.3",
        "info": {
            "title": "PhotoBooth Functions API",
            "version": "0.1.0",
            "description": "HTTP endpoints exposed by the PhotoBooth Azure Functions app.",
        },
        "servers": [
            {"url": "http://localhost:7071/api", "description": "Local Functions host"}
        ],
        "paths": {
            "/compose_photo": {
                "post": {
                    "summary": "Merge an event logo onto a photo, or add a white border",
                    "operationId": "composePhoto",
                    "requestBody": {
                        "required": True,
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/ComposePhotoRequest"}
                            }
                        },
                    },
                    "responses": {
                        "200": {
                            "description": "Encoded image with X-Image-Name and, when compositing succeeded, X-Image-Width/X-Image-Height. With `store` set, the stored blob as JSON",
                            "content": {
                                "application/json": {"schema": {"$ref": "#/components/schemas/StoredPhotoResponse"}},
                                "image/jpeg": {"schema": {"type": "string", "format": "binary"}},
                                "image/png": {"schema": {"type": "string", "format": "binary"}},
                                "image/webp": {"schema": {"type": "string", "format": "binary"}},
                            },
                        },
                        "400": {"description": "Invalid request or image file", "content": error_content},
                        "500": {"description": "Image processing or blob storage failed", "content": error_content},
                    },
                }
            }
        },
        "components": components,
    }


def generate_openapi() -> None:
    write_json_yaml(build_openapi(), SPECS / "openapi.json")


def main() -> None:
    generate_model_schemas()
    generate_openapi()
    print("Specs generated under photobooth/specs/")


if __name__ == "__main__":
    main()
