import pytest

MESSAGE = {
    "name": "Asha",
    "email": "asha@example.com",
    "subject": "Party order",
    "message": "Do you cater for 40 people?",
}


class TestContactAPIIntegration:
    """Contact message endpoints against a real SQLite database."""

    @pytest.mark.asyncio
    async def test_create_and_fetch(self, client):
        response = await client.post("/api/contact", json=MESSAGE)

        assert response.status_code == 201
        created = response.json()["data"]
        assert created["status"] == "new"

        fetched = await client.get(f"/api/contact/messages/{created['id']}")
        assert fetched.json()["data"]["email"] == "asha@example.com"

    @pytest.mark.asyncio
    async def test_form_submission(self, client):
        response = await client.post("/api/contact", data={"name": "Ravi", "email": "ravi@example.com", "message": "Hi"})
        assert response.status_code == 201

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"email": "asha@example.com", "message": "Hi"},
        {"name": "Asha", "email": "not-an-email", "message": "Hi"},
        {"name": "Asha", "email": "asha@example.com", "message": "   "},
    ])
    async def test_invalid_messages(self, client, body):
        response = await client.post("/api/contact", json=body)

        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_status_flow_and_stats(self, client):
        first = (await client.post("/api/contact", json=MESSAGE)).json()["data"]
        await client.post("/api/contact", json=dict(MESSAGE, name="Second"))

        updated = await client.put(f"/api/contact/messages/{first['id']}/status", json={"status": "replied"})
        assert updated.status_code == 200
        assert updated.json()["data"]["status"] == "replied"

        bad = await client.put(f"/api/contact/messages/{first['id']}/status", json={"status": "spam"})
        assert bad.status_code == 400

        replied = await client.get("/api/contact/messages", params={"status": "replied"})
        assert [m["id"] for m in replied.json()["data"]] == [first["id"]]

        stats = await client.get("/api/contact/stats")
        assert stats.json()["data"] == {"total": 2, "new": 1, "read": 0, "replied": 1, "archived": 0}

    @pytest.mark.asyncio
    async def test_delete(self, client):
        created = (await client.post("/api/contact", json=MESSAGE)).json()["data"]

        response = await client.delete(f"/api/contact/messages/{created['id']}")
        assert response.status_code == 200

        missing = await client.get(f"/api/contact/messages/{created['id']}")
        assert missing.status_code == 404
