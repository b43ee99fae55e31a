"""
Product repository - builds parameterized SQL over products joined with categories.
"""
import json
import logging
from typing import Any

from sqlalchemy.exc import DBAPIError

from foodapi.config import Config
from foodapi.db.database import Database
from foodapi.db.errors import classify_db_error
from foodapi.errors import ErrorType
from foodapi.exceptions import AppException
from foodapi.services.normalization import flag_present, generate_slug

logger = logging.getLogger(__name__)

SELECT_PRODUCTS = """
    SELECT p.*, c.name AS category_name, c.slug AS category_slug
    FROM products p
    LEFT JOIN categories c ON p.category_id = c.id
"""

# Columns an update may touch
PRODUCT_COLUMNS = {
    "name", "slug", "description", "price", "original_price", "category_id",
    "image", "type", "tags", "prep_time", "ingredients",
    "is_available", "is_popular", "is_featured",
}
LIST_COLUMNS = {"tags", "ingredients"}
FLOAT_COLUMNS = {"price", "original_price"}
BOOLEAN_COLUMNS = {"is_available", "is_popular", "is_featured"}

SORT_MAP = {
    "price_low": "p.price ASC",
    "price_high": "p.price DESC",
    "popular": "p.rating DESC",
    "newest": "p.created_at DESC",
    "name": "p.name ASC",
}
DEFAULT_ORDER = "p.is_popular DESC, p.created_at DESC"

INVALID_CATEGORY = "Invalid category_id: category does not exist"


def decode_list(value: Any) -> list[str]:
    """Stored JSON array back into a list; anything unreadable becomes []."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    try:
        decoded = json.loads(value)
    except (TypeError, ValueError):
        return []
    return [str(item) for item in decoded] if isinstance(decoded, list) else []


def shape_product(row: dict[str, Any]) -> dict[str, Any]:
    product = dict(row)
    for column in LIST_COLUMNS:
        product[column] = decode_list(product.get(column))
    for column in BOOLEAN_COLUMNS:
        if product.get(column) is not None:
            product[column] = bool(product[column])
    return product


class ProductRepository:
    """CRUD and search over the products table."""

    def __init__(self, db: Database):
        self.db = db

    async def _write(self, sql: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        """Run a write, turning classifiable driver errors into AppExceptions."""
        try:
            return await self.db.execute(sql, params)
        except DBAPIError as e:
            classified = classify_db_error(e, integrity_message=INVALID_CATEGORY)
            if classified is None:
                raise
            raise classified from e

    async def create(self, data: dict[str, Any]) -> dict[str, Any] | None:
        """Insert a product and return the freshly joined record."""
        params = {
            "name": data["name"],
            "slug": data.get("slug") or generate_slug(data["name"]),
            "description": data.get("description") or "",
            "price": float(data["price"]),
            "original_price": float(data["original_price"]) if data.get("original_price") else None,
            "category_id": int(data["category_id"]),
            "image": data["image"],
            "type": data["type"],
            "tags": json.dumps(data.get("tags") or [], ensure_ascii=False),
            "prep_time": data.get("prep_time") or Config.DEFAULT_PREP_TIME,
            "ingredients": json.dumps(data.get("ingredients") or [], ensure_ascii=False),
            "is_available": bool(data.get("is_available", True)),
            "is_popular": bool(data.get("is_popular", False)),
            "is_featured": bool(data.get("is_featured", False)),
        }

        sql = """
            INSERT INTO products
                (name, slug, description, price, original_price, category_id,
                 image, type, tags, prep_time, ingredients,
                 is_available, is_popular, is_featured, created_at, updated_at)
            VALUES
                (:name, :slug, :description, :price, :original_price, :category_id,
                 :image, :type, :tags, :prep_time, :ingredients,
                 :is_available, :is_popular, :is_featured, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)
            RETURNING id
        """
        rows = await self._write(sql, params)
        product_id = rows[0]["id"]
        logger.info(f"Product created with ID: {product_id}")
        return await self.find_by_id(product_id)

    async def find_all(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        filters = filters or {}
        conditions = []
        params: dict[str, Any] = {}

        if filters.get("category_id") not in (None, ""):
            conditions.append("p.category_id = :category_id")
            params["category_id"] = int(filters["category_id"])

        if filters.get("category_slug"):
            conditions.append("c.slug = :category_slug")
            params["category_slug"] = filters["category_slug"]

        if filters.get("type"):
            conditions.append("p.type = :type")
            params["type"] = str(filters["type"]).lower()

        if flag_present(filters.get("is_popular")):
            conditions.append("p.is_popular = :is_popular")
            params["is_popular"] = True

        if flag_present(filters.get("is_featured")):
            conditions.append("p.is_featured = :is_featured")
            params["is_featured"] = True

        # Only show available items by default
        if not flag_present(filters.get("show_all")):
            conditions.append("p.is_available = :is_available")
            params["is_available"] = True

        sql = SELECT_PRODUCTS
        if conditions:
            sql += f" WHERE {' AND '.join(conditions)}"

        sort_by = filters.get("sort_by")
        if sort_by:
            sql += f" ORDER BY {SORT_MAP.get(sort_by, 'p.created_at DESC')}, p.id DESC"
        else:
            sql += f" ORDER BY {DEFAULT_ORDER}, p.id DESC"

        if filters.get("limit") not in (None, ""):
            sql += " LIMIT :limit"
            params["limit"] = int(filters["limit"])

        logger.debug(f"Product query: {sql} {params}")
        rows = await self.db.execute_query(sql, params)
        return [shape_product(row) for row in rows]

    async def find_by_id(self, product_id: int) -> dict[str, Any] | None:
        """Joined lookup; None when the product does not exist."""
        rows = await self.db.execute_query(
            f"{SELECT_PRODUCTS} WHERE p.id = :id",
            {"id": product_id}
        )
        return shape_product(rows[0]) if rows else None

    async def update(self, product_id: int, data: dict[str, Any]) -> dict[str, Any] | None:
        """Write exactly the supplied columns and refresh updated_at."""
        unknown = sorted(set(data) - PRODUCT_COLUMNS)
        if unknown:
            raise AppException(
                ErrorType.SCHEMA,
                "Invalid field data",
                detail=f"Unknown field(s): {', '.join(unknown)}"
            )

        fields = []
        params: dict[str, Any] = {"id": product_id}
        for key, value in data.items():
            if key in LIST_COLUMNS:
                value = json.dumps(value, ensure_ascii=False)
            elif key in FLOAT_COLUMNS:
                value = float(value) if value is not None else None
            elif key == "category_id":
                value = int(value)
            fields.append(f"{key} = :{key}")
            params[key] = value

        # Always update updated_at
        fields.append("updated_at = CURRENT_TIMESTAMP")

        await self._write(f"UPDATE products SET {', '.join(fields)} WHERE id = :id", params)

        return await self.find_by_id(product_id)

    async def delete(self, product_id: int) -> bool:
        """Soft delete: the row stays, only marked unavailable."""
        await self.db.execute(
            "UPDATE products SET is_available = :is_available, updated_at = CURRENT_TIMESTAMP WHERE id = :id",
            {"id": product_id, "is_available": False}
        )
        return True

    async def search(self, term: str) -> list[dict[str, Any]]:
        pattern = f"%{term.lower()}%"
        sql = f"""
            {SELECT_PRODUCTS}
            WHERE (LOWER(p.name) LIKE :term
                   OR LOWER(COALESCE(p.description, '')) LIKE :term
                   OR LOWER(COALESCE(p.tags, '')) LIKE :term)
              AND p.is_available = :is_available
            ORDER BY p.is_popular DESC, p.rating DESC, p.id DESC
            LIMIT :limit
        """
        rows = await self.db.execute_query(
            sql,
            {"term": pattern, "is_available": True, "limit": Config.SEARCH_LIMIT}
        )
        return [shape_product(row) for row in rows]
