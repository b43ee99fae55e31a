import logging
from typing import Any

from sqlalchemy.exc import DBAPIError

from foodapi.db.database import Database
from foodapi.db.errors import classify_db_error
from foodapi.errors import ErrorType
from foodapi.exceptions import AppException
from foodapi.services.normalization import generate_slug

logger = logging.getLogger(__name__)

SELECT_CATEGORIES = """
    SELECT c.*,
           (SELECT COUNT(*) FROM products p
            WHERE p.category_id = c.id AND p.is_available = :available) AS product_count
    FROM categories c
"""

CATEGORY_COLUMNS = {"name", "slug", "description", "image", "is_active", "sort_order"}

DUPLICATE_SLUG = "A category with this slug already exists"
CATEGORY_IN_USE = "Cannot delete a category that still has products"


def shape_category(row: dict[str, Any]) -> dict[str, Any]:
    category = dict(row)
    if category.get("is_active") is not None:
        category["is_active"] = bool(category["is_active"])
    return category


class CategoryRepository:
    def __init__(self, db: Database):
        self.db = db

    async def find_all(self, show_all: bool = False) -> list[dict[str, Any]]:
        sql = SELECT_CATEGORIES
        params: dict[str, Any] = {"available": True}
        if not show_all:
            sql += " WHERE c.is_active = :active"
            params["active"] = True
        sql += " ORDER BY c.sort_order ASC, c.name ASC"
        rows = await self.db.execute_query(sql, params)
        return [shape_category(row) for row in rows]

    async def find_by_id(self, category_id: int) -> dict[str, Any] | None:
        rows = await self.db.execute_query(
            f"{SELECT_CATEGORIES} WHERE c.id = :id",
            {"available": True, "id": category_id}
        )
        return shape_category(rows[0]) if rows else None

    async def find_by_slug(self, slug: str) -> dict[str, Any] | None:
        rows = await self.db.execute_query(
            f"{SELECT_CATEGORIES} WHERE c.slug = :slug",
            {"available": True, "slug": slug}
        )
        return shape_category(rows[0]) if rows else None

    async def create(self, data: dict[str, Any]) -> dict[str, Any] | None:
        params = {
            "name": data["name"],
            "slug": data.get("slug") or generate_slug(data["name"]),
            "description": data.get("description") or "",
            "image": data.get("image"),
            "is_active": bool(data.get("is_active", True)),
            "sort_order": int(data.get("sort_order") or 0),
        }
        try:
            rows = await self.db.execute(
                """
                INSERT INTO categories
                    (name, slug, description, image, is_active, sort_order, created_at, updated_at)
                VALUES
                    (:name, :slug, :description, :image, :is_active, :sort_order,
                     CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)
                RETURNING id
                """,
                params
            )
        except DBAPIError as e:
            classified = classify_db_error(e, conflict_message=DUPLICATE_SLUG)
            if classified is None:
                raise
            raise classified from e

        category_id = rows[0]["id"]
        logger.info(f"Category created with ID: {category_id}")
        return await self.find_by_id(category_id)

    async def update(self, category_id: int, data: dict[str, Any]) -> dict[str, Any] | None:
        unknown = sorted(set(data) - CATEGORY_COLUMNS)
        if unknown:
            raise AppException(
                ErrorType.SCHEMA,
                "Invalid field data",
                detail=f"Unknown field(s): {', '.join(unknown)}"
            )

        fields = [f"{key} = :{key}" for key in data]
        fields.append("updated_at = CURRENT_TIMESTAMP")
        params = dict(data, id=category_id)
        try:
            await self.db.execute(
                f"UPDATE categories SET {', '.join(fields)} WHERE id = :id",
                params
            )
        except DBAPIError as e:
            classified = classify_db_error(e, conflict_message=DUPLICATE_SLUG)
            if classified is None:
                raise
            raise classified from e

        return await self.find_by_id(category_id)

    async def delete(self, category_id: int) -> bool:
        """Hard delete; refused while products reference the category."""
        try:
            await self.db.execute("DELETE FROM categories WHERE id = :id", {"id": category_id})
        except DBAPIError as e:
            classified = classify_db_error(e, integrity_message=CATEGORY_IN_USE)
            if classified is None:
                raise
            raise classified from e
        return True
