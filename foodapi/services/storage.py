import logging
import os
import uuid
from pathlib import Path

from starlette.datastructures import UploadFile

from foodapi.config import Config
from foodapi.errors import ErrorType
from foodapi.exceptions import AppException

logger = logging.getLogger(__name__)

PRODUCT_IMAGES = "products"
CATEGORY_IMAGES = "categories"


def get_upload_dir(folder: str) -> Path:
    upload_dir = Path(Config.UPLOAD_DIR) / folder
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir


async def save_image(file: UploadFile, folder: str = PRODUCT_IMAGES) -> str:
    """Store an uploaded image and return its public path.

    Only image/* content types up to MAX_UPLOAD_SIZE are accepted.
    """
    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise AppException(
            ErrorType.VALIDATION,
            "Only image files are allowed",
            detail=f"Invalid content type: {content_type or 'unknown'}"
        )

    content = await file.read(Config.MAX_UPLOAD_SIZE + 1)
    if len(content) > Config.MAX_UPLOAD_SIZE:
        raise AppException(
            ErrorType.VALIDATION,
            f"Image must be at most {Config.MAX_UPLOAD_SIZE // (1024 * 1024)}MB"
        )

    extension = os.path.splitext(file.filename or "")[1].lower() or ".jpg"
    filename = f"{uuid.uuid4().hex}{extension}"
    out_path = get_upload_dir(folder) / filename
    with open(out_path, "wb") as f:
        f.write(content)

    public_path = f"{Config.UPLOAD_URL_PREFIX.rstrip('/')}/{folder}/{filename}"
    logger.info(f"Stored upload '{file.filename}' as {public_path}")
    return public_path


def discard_image(public_path: str | None) -> None:
    """Remove a stored upload by its public path; no-op for anything else."""
    prefix = f"{Config.UPLOAD_URL_PREFIX.rstrip('/')}/"
    if not public_path or not public_path.startswith(prefix):
        return

    Path(Config.UPLOAD_DIR, public_path[len(prefix):]).unlink(missing_ok=True)
    logger.info(f"Discarded upload {public_path}")
