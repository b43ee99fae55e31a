"""
Normalization of loosely typed wire values into domain types.

JSON bodies and multipart forms encode the same product differently:
booleans arrive as true/"true"/"1", lists as real arrays, JSON strings or
comma-separated text. Everything here is pure and raises AppException
(VALIDATION or SCHEMA) on bad input.
"""
import json
import re
from typing import Any

from pydantic import ValidationError

from foodapi.config import Config
from foodapi.errors import ErrorType
from foodapi.exceptions import AppException
from foodapi.schemas.category import CategoryChanges, CategoryCreate, CategoryPayload
from foodapi.schemas.product import ProductChanges, ProductCreate, ProductPayload, ProductType

TRUTHY_STRINGS = {"true", "1"}
FALSY_STRINGS = {"", "false", "0"}

REQUIRED_PRODUCT_FIELDS = ["name", "price", "category_id", "type", "image"]

UPDATABLE_PRODUCT_FIELDS = set(ProductChanges.model_fields)
UPDATABLE_CATEGORY_FIELDS = set(CategoryChanges.model_fields)

# Sent by form clients that stringify a missing value
UNDEFINED_IMAGE = "undefined"


def generate_slug(name: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to "-", trim hyphens."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def coerce_boolean(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return str(value).strip().lower() in TRUTHY_STRINGS


def flag_present(value: Any) -> bool:
    """A query flag counts when it is present and not explicitly false."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in FALSY_STRINGS


def coerce_string_list(value: Any) -> list[str]:
    """Accept a list, a JSON-encoded array or comma-separated text."""
    if value is None:
        return []

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError:
            decoded = None
        if isinstance(decoded, list):
            value = decoded
        else:
            value = text.split(",")

    if not isinstance(value, (list, tuple)):
        value = [value]

    items = []
    for item in value:
        if item is None:
            continue
        item = str(item).strip()
        if item:
            items.append(item)
    return items


def normalize_type(value: Any) -> ProductType:
    normalized = str(value).strip().lower()
    try:
        return ProductType(normalized)
    except ValueError:
        raise AppException(
            ErrorType.VALIDATION,
            "Type must be either 'veg' or 'non-veg'",
            detail=f"Invalid type: {value}"
        )


def parse_price(field: str, value: Any) -> float:
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise AppException(ErrorType.VALIDATION, f"{field} must be a number", detail=f"Invalid {field}: {value}")
    if price <= 0:
        raise AppException(ErrorType.VALIDATION, f"{field} must be greater than 0", detail=f"Invalid {field}: {value}")
    return price


def parse_int(field: str, value: Any) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise AppException(ErrorType.VALIDATION, f"{field} must be an integer", detail=f"Invalid {field}: {value}")


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def parse_original_price(value: Any) -> float | None:
    """Blank or zero means no original price."""
    if is_blank(value):
        return None
    try:
        is_zero = float(value) == 0
    except (TypeError, ValueError):
        is_zero = False
    return None if is_zero else parse_price("original_price", value)


def validation_error(exc: ValidationError) -> AppException:
    """Convert a pydantic ValidationError into a 400."""
    detail = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )
    return AppException(ErrorType.VALIDATION, "Invalid field values", detail=detail)


def _resolve_image(uploaded_image: str | None, body_image: Any) -> str | None:
    """Upload first, then an explicit image string from the body."""
    if uploaded_image:
        return uploaded_image
    if isinstance(body_image, str) and body_image.strip() and body_image.strip() != UNDEFINED_IMAGE:
        return body_image.strip()
    return None


def normalize_create(payload: ProductPayload, uploaded_image: str | None = None) -> ProductCreate:
    data = payload.supplied()
    image = _resolve_image(uploaded_image, data.get("image"))

    missing = [f for f in REQUIRED_PRODUCT_FIELDS if f != "image" and is_blank(data.get(f))]
    if image is None:
        missing.append("image")
    if missing:
        raise AppException(
            ErrorType.VALIDATION,
            f"Required fields: {', '.join(REQUIRED_PRODUCT_FIELDS)}",
            detail=f"Missing: {', '.join(missing)}"
        )

    try:
        return ProductCreate(
            name=str(data["name"]).strip(),
            description=data.get("description") or "",
            price=parse_price("price", data["price"]),
            original_price=parse_original_price(data.get("original_price")),
            category_id=parse_int("category_id", data["category_id"]),
            image=image,
            type=normalize_type(data["type"]),
            tags=coerce_string_list(data.get("tags")),
            prep_time=data.get("prep_time") or Config.DEFAULT_PREP_TIME,
            ingredients=coerce_string_list(data.get("ingredients")),
            is_available=coerce_boolean(data.get("is_available"), default=True),
            is_popular=coerce_boolean(data.get("is_popular"), default=False),
            is_featured=coerce_boolean(data.get("is_featured"), default=False),
            slug=data.get("slug") or None,
        )
    except ValidationError as e:
        raise validation_error(e)


def normalize_update(payload: ProductPayload, uploaded_image: str | None = None) -> ProductChanges:
    """Build a partial update from the present, non-empty fields.

    The stored image is kept unless an upload or an explicit image string
    replaces it.
    """
    data = {k: v for k, v in payload.supplied().items() if not is_blank(v)}
    data.pop("image", None)

    unknown = sorted(set(data) - UPDATABLE_PRODUCT_FIELDS)
    if unknown:
        raise AppException(
            ErrorType.SCHEMA,
            "Invalid field data",
            detail=f"Unknown field(s): {', '.join(unknown)}"
        )

    image = _resolve_image(uploaded_image, payload.image)
    if image is not None:
        data["image"] = image

    if not data:
        raise AppException(ErrorType.VALIDATION, "No data provided for update")

    changes = {}
    for key, value in data.items():
        if key in ("is_available", "is_popular", "is_featured"):
            changes[key] = coerce_boolean(value)
        elif key in ("tags", "ingredients"):
            changes[key] = coerce_string_list(value)
        elif key == "price":
            changes[key] = parse_price(key, value)
        elif key == "original_price":
            changes[key] = parse_original_price(value)
        elif key == "category_id":
            changes[key] = parse_int(key, value)
        elif key == "type":
            changes[key] = normalize_type(value)
        elif isinstance(value, str):
            changes[key] = value.strip()
        else:
            changes[key] = value

    try:
        return ProductChanges(**changes)
    except ValidationError as e:
        raise validation_error(e)


def normalize_category_create(payload: CategoryPayload, uploaded_image: str | None = None) -> CategoryCreate:
    data = payload.supplied()
    if is_blank(data.get("name")):
        raise AppException(ErrorType.VALIDATION, "Required fields: name", detail="Missing: name")

    sort_order = data.get("sort_order")
    try:
        return CategoryCreate(
            name=str(data["name"]).strip(),
            slug=data.get("slug") or None,
            description=data.get("description") or "",
            image=_resolve_image(uploaded_image, data.get("image")),
            is_active=coerce_boolean(data.get("is_active"), default=True),
            sort_order=0 if is_blank(sort_order) else parse_int("sort_order", sort_order),
        )
    except ValidationError as e:
        raise validation_error(e)


def normalize_category_update(payload: CategoryPayload, uploaded_image: str | None = None) -> CategoryChanges:
    data = {k: v for k, v in payload.supplied().items() if not is_blank(v)}
    data.pop("image", None)

    unknown = sorted(set(data) - UPDATABLE_CATEGORY_FIELDS)
    if unknown:
        raise AppException(
            ErrorType.SCHEMA,
            "Invalid field data",
            detail=f"Unknown field(s): {', '.join(unknown)}"
        )

    image = _resolve_image(uploaded_image, payload.image)
    if image is not None:
        data["image"] = image

    if not data:
        raise AppException(ErrorType.VALIDATION, "No data provided for update")

    if "is_active" in data:
        data["is_active"] = coerce_boolean(data["is_active"])
    if "sort_order" in data:
        data["sort_order"] = parse_int("sort_order", data["sort_order"])

    try:
        return CategoryChanges(**data)
    except ValidationError as e:
        raise validation_error(e)
