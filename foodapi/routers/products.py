import logging

from fastapi import APIRouter, Depends, Query, Request, status

from foodapi.dependencies import get_product_repository
from foodapi.errors import ErrorType
from foodapi.exceptions import AppException, server_error
from foodapi.repositories.product_repository import ProductRepository
from foodapi.routers.forms import parse_model, read_payload
from foodapi.schemas.common import MessageResponse
from foodapi.schemas.product import ProductDetailResponse, ProductListResponse, ProductPayload
from foodapi.services.normalization import normalize_create, normalize_update
from foodapi.services.storage import PRODUCT_IMAGES, discard_image, save_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])

PRODUCT_NOT_FOUND = "Product not found"


async def _get_existing(repo: ProductRepository, product_id: int) -> dict:
    try:
        product = await repo.find_by_id(product_id)
    except Exception as e:
        logger.error(f"Get product error: {e}", exc_info=True)
        raise server_error(e) from e

    if not product:
        logger.warning(f"Product with ID {product_id} not found")
        raise AppException(ErrorType.NOT_FOUND, PRODUCT_NOT_FOUND)
    return product


@router.get("", response_model=ProductListResponse)
async def list_products(
    category_id: int | None = None,
    category_slug: str | None = None,
    type: str | None = None,
    is_popular: str | None = None,
    is_featured: str | None = None,
    show_all: str | None = None,
    sort_by: str | None = None,
    limit: int | None = Query(None, ge=1),
    repo: ProductRepository = Depends(get_product_repository),
):
    filters = {
        "category_id": category_id,
        "category_slug": category_slug,
        "type": type,
        "is_popular": is_popular,
        "is_featured": is_featured,
        "show_all": show_all,
        "sort_by": sort_by,
        "limit": limit,
    }
    filters = {k: v for k, v in filters.items() if v is not None}
    logger.info(f"Getting products with filters: {filters}")

    try:
        products = await repo.find_all(filters)
    except Exception as e:
        logger.error(f"Get products error: {e}", exc_info=True)
        raise server_error(e) from e

    return {"success": True, "count": len(products), "data": products}


@router.get("/search/{query}", response_model=ProductListResponse)
async def search_products(query: str, repo: ProductRepository = Depends(get_product_repository)):
    try:
        products = await repo.search(query)
    except Exception as e:
        logger.error(f"Search products error: {e}", exc_info=True)
        raise server_error(e) from e

    return {"success": True, "count": len(products), "data": products}


@router.get("/category/{slug}", response_model=ProductListResponse)
async def get_products_by_category(slug: str, repo: ProductRepository = Depends(get_product_repository)):
    try:
        products = await repo.find_all({"category_slug": slug})
    except Exception as e:
        logger.error(f"Get category products error: {e}", exc_info=True)
        raise server_error(e) from e

    return {"success": True, "count": len(products), "data": products}


@router.get("/{product_id}", response_model=ProductDetailResponse)
async def get_product(product_id: int, repo: ProductRepository = Depends(get_product_repository)):
    product = await _get_existing(repo, product_id)
    return {"success": True, "data": product}


@router.post("", response_model=ProductDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_product(request: Request, repo: ProductRepository = Depends(get_product_repository)):
    """Create a product from a JSON body or a multipart form with an optional image file."""
    data, upload = await read_payload(request)
    payload = parse_model(ProductPayload, data)

    uploaded_image = await save_image(upload, PRODUCT_IMAGES) if upload else None
    try:
        product_in = normalize_create(payload, uploaded_image)
        logger.info(f"Creating product: {product_in.name}")
        product = await repo.create(product_in.model_dump(mode="json"))
    except AppException:
        discard_image(uploaded_image)
        raise
    except Exception as e:
        discard_image(uploaded_image)
        logger.error(f"Create product error: {e}", exc_info=True)
        raise server_error(e) from e

    # Insert and re-fetch are separate round-trips
    if not product:
        raise AppException(ErrorType.NOT_FOUND, PRODUCT_NOT_FOUND)

    logger.info(f"Product created successfully: {product['id']}")
    return {"success": True, "message": "Product created successfully", "data": product}


@router.put("/{product_id}", response_model=ProductDetailResponse)
async def update_product(
    product_id: int,
    request: Request,
    repo: ProductRepository = Depends(get_product_repository),
):
    await _get_existing(repo, product_id)

    data, upload = await read_payload(request)
    payload = parse_model(ProductPayload, data)

    uploaded_image = await save_image(upload, PRODUCT_IMAGES) if upload else None
    try:
        changes = normalize_update(payload, uploaded_image).model_dump(exclude_unset=True, mode="json")
        logger.info(f"Updating product {product_id} with fields: {sorted(changes)}")
        product = await repo.update(product_id, changes)
    except AppException:
        discard_image(uploaded_image)
        raise
    except Exception as e:
        discard_image(uploaded_image)
        logger.error(f"Update product error: {e}", exc_info=True)
        raise server_error(e) from e

    if not product:
        raise AppException(ErrorType.NOT_FOUND, PRODUCT_NOT_FOUND)

    return {"success": True, "message": "Product updated successfully", "data": product}


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(product_id: int, repo: ProductRepository = Depends(get_product_repository)):
    """Soft delete: the product is marked unavailable, never removed."""
    await _get_existing(repo, product_id)

    try:
        await repo.delete(product_id)
    except Exception as e:
        logger.error(f"Delete product error: {e}", exc_info=True)
        raise server_error(e) from e

    logger.info(f"Product {product_id} marked unavailable")
    return {"success": True, "message": "Product deleted successfully"}
