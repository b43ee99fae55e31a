import asyncio
import logging

from foodapi.config import Config
from foodapi.db.database import Database, db
from foodapi.repositories.category_repository import CategoryRepository
from foodapi.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


# Sample categories: (name, description, sort_order)
CATEGORIES_DATA = [
    ("Starters", "Small plates to begin with", 1),
    ("Main Course", "Curries, grills and rice dishes", 2),
    ("Desserts", "Something sweet", 3),
    ("Beverages", "Hot and cold drinks", 4),
]

# Products per category: (name, price, type, tags, is_popular, is_featured)
PRODUCTS_DATA = {
    "Starters": [
        ("Paneer Tikka", 249.0, "veg", ["spicy", "grilled"], True, False),
        ("Chicken 65", 279.0, "non-veg", ["spicy", "fried"], True, True),
        ("Veg Spring Rolls", 179.0, "veg", ["crispy"], False, False),
    ],
    "Main Course": [
        ("Butter Chicken", 349.0, "non-veg", ["creamy", "chef special"], True, True),
        ("Dal Makhani", 229.0, "veg", ["creamy"], False, True),
        ("Veg Biryani", 259.0, "veg", ["rice", "aromatic"], False, False),
    ],
    "Desserts": [
        ("Gulab Jamun", 99.0, "veg", ["sweet", "warm"], True, False),
        ("Rasmalai", 129.0, "veg", ["sweet", "chilled"], False, False),
    ],
    "Beverages": [
        ("Masala Chai", 49.0, "veg", ["hot"], False, False),
        ("Mango Lassi", 119.0, "veg", ["chilled", "sweet"], True, False),
    ],
}


async def seed_database(database: Database = db) -> bool:
    """Create tables and insert the sample menu. Returns False if already seeded."""
    await database.create_tables()

    # Check if data exists
    existing = await database.execute_query("SELECT id FROM categories LIMIT 1")
    if existing:
        logger.info("Database already seeded")
        return False

    categories = CategoryRepository(database)
    products = ProductRepository(database)

    for name, description, sort_order in CATEGORIES_DATA:
        category = await categories.create({
            "name": name,
            "description": description,
            "sort_order": sort_order,
        })
        for product_name, price, food_type, tags, is_popular, is_featured in PRODUCTS_DATA[name]:
            await products.create({
                "name": product_name,
                "description": f"{product_name} from our {name.lower()} menu",
                "price": price,
                "category_id": category["id"],
                "image": Config.DEFAULT_PRODUCT_IMAGE,
                "type": food_type,
                "tags": tags,
                "is_popular": is_popular,
                "is_featured": is_featured,
            })

    logger.info("Database seeded successfully!")
    return True


async def main():
    try:
        await seed_database(db)
    finally:
        await db.disconnect()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
