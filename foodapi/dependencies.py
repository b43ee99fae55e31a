from fastapi import Depends

from foodapi.db.database import Database, get_database
from foodapi.repositories.category_repository import CategoryRepository
from foodapi.repositories.contact_repository import ContactRepository
from foodapi.repositories.product_repository import ProductRepository


def get_product_repository(database: Database = Depends(get_database)) -> ProductRepository:
    return ProductRepository(database)


def get_category_repository(database: Database = Depends(get_database)) -> CategoryRepository:
    return CategoryRepository(database)


def get_contact_repository(database: Database = Depends(get_database)) -> ContactRepository:
    return ContactRepository(database)
