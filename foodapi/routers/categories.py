import logging

from fastapi import APIRouter, Depends, Request, status

from foodapi.dependencies import get_category_repository
from foodapi.errors import ErrorType
from foodapi.exceptions import AppException, server_error
from foodapi.repositories.category_repository import CategoryRepository
from foodapi.routers.forms import parse_model, read_payload
from foodapi.schemas.category import CategoryDetailResponse, CategoryListResponse, CategoryPayload
from foodapi.schemas.common import MessageResponse
from foodapi.services.normalization import flag_present, normalize_category_create, normalize_category_update
from foodapi.services.storage import CATEGORY_IMAGES, discard_image, save_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/categories", tags=["categories"])

CATEGORY_NOT_FOUND = "Category not found"


@router.get("", response_model=CategoryListResponse)
async def list_categories(
    show_all: str | None = None,
    repo: CategoryRepository = Depends(get_category_repository),
):
    try:
        categories = await repo.find_all(show_all=flag_present(show_all))
    except Exception as e:
        logger.error(f"Get categories error: {e}", exc_info=True)
        raise server_error(e) from e

    return {"success": True, "count": len(categories), "data": categories}


@router.get("/{slug}", response_model=CategoryDetailResponse)
async def get_category(slug: str, repo: CategoryRepository = Depends(get_category_repository)):
    try:
        category = await repo.find_by_slug(slug)
    except Exception as e:
        logger.error(f"Get category error: {e}", exc_info=True)
        raise server_error(e) from e

    if not category:
        raise AppException(ErrorType.NOT_FOUND, CATEGORY_NOT_FOUND)
    return {"success": True, "data": category}


@router.post("", response_model=CategoryDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_category(request: Request, repo: CategoryRepository = Depends(get_category_repository)):
    data, upload = await read_payload(request)
    payload = parse_model(CategoryPayload, data)

    uploaded_image = await save_image(upload, CATEGORY_IMAGES) if upload else None
    try:
        category_in = normalize_category_create(payload, uploaded_image)
        logger.info(f"Creating category: {category_in.name}")
        category = await repo.create(category_in.model_dump())
    except AppException:
        discard_image(uploaded_image)
        raise
    except Exception as e:
        discard_image(uploaded_image)
        logger.error(f"Create category error: {e}", exc_info=True)
        raise server_error(e) from e

    return {"success": True, "message": "Category created successfully", "data": category}


@router.put("/{category_id}", response_model=CategoryDetailResponse)
async def update_category(
    category_id: int,
    request: Request,
    repo: CategoryRepository = Depends(get_category_repository),
):
    if not await repo.find_by_id(category_id):
        raise AppException(ErrorType.NOT_FOUND, CATEGORY_NOT_FOUND)

    data, upload = await read_payload(request)
    payload = parse_model(CategoryPayload, data)

    uploaded_image = await save_image(upload, CATEGORY_IMAGES) if upload else None
    try:
        changes = normalize_category_update(payload, uploaded_image).model_dump(exclude_unset=True)
        category = await repo.update(category_id, changes)
    except AppException:
        discard_image(uploaded_image)
        raise
    except Exception as e:
        discard_image(uploaded_image)
        logger.error(f"Update category error: {e}", exc_info=True)
        raise server_error(e) from e

    return {"success": True, "message": "Category updated successfully", "data": category}


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(category_id: int, repo: CategoryRepository = Depends(get_category_repository)):
    if not await repo.find_by_id(category_id):
        raise AppException(ErrorType.NOT_FOUND, CATEGORY_NOT_FOUND)

    try:
        await repo.delete(category_id)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Delete category error: {e}", exc_info=True)
        raise server_error(e) from e

    return {"success": True, "message": "Category deleted successfully"}
