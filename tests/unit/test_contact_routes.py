import pytest
from unittest.mock import AsyncMock
from httpx import AsyncClient, ASGITransport

from foodapi.config import Config
from foodapi.dependencies import get_contact_repository
from foodapi.main import app
from foodapi.repositories.contact_repository import ContactRepository

MESSAGE = {
    "id": 3,
    "name": "Asha",
    "email": "asha@example.com",
    "phone": None,
    "subject": None,
    "message": "Do you cater?",
    "status": "new",
    "created_at": "2026-01-05T10:00:00",
    "updated_at": "2026-01-05T10:00:00",
}


@pytest.fixture
def contact_repo():
    mock = AsyncMock(spec=ContactRepository)
    mock.find_by_id.return_value = MESSAGE
    return mock


@pytest.fixture
async def contact_client(contact_repo, monkeypatch):
    monkeypatch.setattr(Config, "ENVIRONMENT", "production")
    app.dependency_overrides[get_contact_repository] = lambda: contact_repo

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


class TestContactFailures:
    """Repository failures surface as the generic 500 envelope."""

    @pytest.mark.asyncio
    async def test_status_update_failure(self, contact_client, contact_repo):
        contact_repo.update_status.side_effect = RuntimeError("connection lost")

        response = await contact_client.put("/api/contact/messages/3/status", json={"status": "read"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Server error"}

    @pytest.mark.asyncio
    async def test_delete_failure(self, contact_client, contact_repo):
        contact_repo.delete.side_effect = RuntimeError("connection lost")

        response = await contact_client.delete("/api/contact/messages/3")

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Server error"}

    @pytest.mark.asyncio
    async def test_lookup_failure(self, contact_client, contact_repo):
        contact_repo.find_by_id.side_effect = RuntimeError("connection lost")

        response = await contact_client.get("/api/contact/messages/3")

        assert response.status_code == 500
        assert response.json()["success"] is False
