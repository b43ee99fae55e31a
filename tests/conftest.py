import pytest
from unittest.mock import AsyncMock
from httpx import AsyncClient, ASGITransport

from foodapi.config import Config
from foodapi.db.database import Database, get_database
from foodapi.dependencies import get_product_repository
from foodapi.main import app
from foodapi.repositories.category_repository import CategoryRepository
from foodapi.repositories.product_repository import ProductRepository


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Keep uploaded files inside the test's tmp dir."""
    directory = tmp_path / "uploads"
    monkeypatch.setattr(Config, "UPLOAD_DIR", str(directory))
    return directory


@pytest.fixture
async def database(tmp_path):
    """Real SQLite database, fresh for every test."""
    database = Database(f"sqlite:///{tmp_path / 'test.db'}")
    await database.create_tables()
    yield database
    await database.disconnect()


@pytest.fixture
def product_repo(database):
    return ProductRepository(database)


@pytest.fixture
def category_repo(database):
    return CategoryRepository(database)


@pytest.fixture
async def category(category_repo):
    return await category_repo.create({"name": "Main Course", "sort_order": 1})


@pytest.fixture
def product_data(category):
    return {
        "name": "Paneer Tikka",
        "description": "Grilled cottage cheese",
        "price": 249.0,
        "category_id": category["id"],
        "image": "/images/dishes/paneer.jpg",
        "type": "veg",
        "tags": ["spicy", "grilled"],
        "ingredients": ["paneer", "yogurt"],
    }


@pytest.fixture
async def client(database):
    """Async test client backed by the SQLite database."""
    app.dependency_overrides[get_database] = lambda: database

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def mock_repo():
    """Mock product repository for testing without a database."""
    mock = AsyncMock(spec=ProductRepository)
    mock.find_all.return_value = []
    mock.search.return_value = []
    mock.find_by_id.return_value = None
    return mock


@pytest.fixture
async def mock_client(mock_repo):
    """Async test client with the product repository mocked."""
    app.dependency_overrides[get_product_repository] = lambda: mock_repo

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
