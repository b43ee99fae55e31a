"""
Read a request body that may be JSON or a (multipart) form.
"""
import json
from typing import Any, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError
from starlette.datastructures import UploadFile

from foodapi.errors import ErrorType
from foodapi.exceptions import AppException
from foodapi.services.normalization import validation_error

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def read_payload(request: Request, file_field: str = "image") -> tuple[dict[str, Any], UploadFile | None]:
    """Return the body fields and the uploaded file, if any.

    Repeated form fields become lists. A file part without a filename
    counts as no upload.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(FORM_TYPES):
        form = await request.form()
        data: dict[str, Any] = {}
        upload = None
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if key == file_field and value.filename:
                    upload = value
                continue
            if key in data:
                previous = data[key]
                data[key] = previous + [value] if isinstance(previous, list) else [previous, value]
            else:
                data[key] = value
        return data, upload

    body = await request.body()
    if not body.strip():
        return {}, None
    try:
        data = json.loads(body)
    except ValueError:
        raise AppException(ErrorType.VALIDATION, "Invalid JSON body")
    if not isinstance(data, dict):
        raise AppException(ErrorType.VALIDATION, "Request body must be a JSON object")
    return data, None


def parse_model(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise validation_error(e)
