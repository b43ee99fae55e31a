from typing import Any

from foodapi.db.database import Database
from foodapi.schemas.contact import MessageStatus


class ContactRepository:
    """Messages sent through the public contact form."""

    def __init__(self, db: Database):
        self.db = db

    async def create(self, data: dict[str, Any]) -> dict[str, Any] | None:
        rows = await self.db.execute(
            """
            INSERT INTO contact_messages
                (name, email, phone, subject, message, status, created_at, updated_at)
            VALUES
                (:name, :email, :phone, :subject, :message, :status,
                 CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)
            RETURNING id
            """,
            {
                "name": data["name"],
                "email": data["email"],
                "phone": data.get("phone"),
                "subject": data.get("subject"),
                "message": data["message"],
                "status": MessageStatus.NEW.value,
            }
        )
        return await self.find_by_id(rows[0]["id"])

    async def find_all(self, status: str | None = None) -> list[dict[str, Any]]:
        sql = "SELECT * FROM contact_messages"
        params = {}
        if status:
            sql += " WHERE status = :status"
            params["status"] = status
        sql += " ORDER BY created_at DESC, id DESC"
        return await self.db.execute_query(sql, params)

    async def find_by_id(self, message_id: int) -> dict[str, Any] | None:
        rows = await self.db.execute_query(
            "SELECT * FROM contact_messages WHERE id = :id",
            {"id": message_id}
        )
        return rows[0] if rows else None

    async def update_status(self, message_id: int, status: str) -> dict[str, Any] | None:
        await self.db.execute(
            "UPDATE contact_messages SET status = :status, updated_at = CURRENT_TIMESTAMP WHERE id = :id",
            {"id": message_id, "status": status}
        )
        return await self.find_by_id(message_id)

    async def delete(self, message_id: int) -> bool:
        await self.db.execute("DELETE FROM contact_messages WHERE id = :id", {"id": message_id})
        return True

    async def stats(self) -> dict[str, int]:
        rows = await self.db.execute_query(
            "SELECT status, COUNT(*) AS total FROM contact_messages GROUP BY status"
        )
        counts = {status.value: 0 for status in MessageStatus}
        for row in rows:
            if row["status"] in counts:
                counts[row["status"]] = int(row["total"])
        return {"total": sum(counts.values()), **counts}
