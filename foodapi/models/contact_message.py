from sqlalchemy import Column, Integer, String, Text, DateTime, func
from foodapi.db.database import Base


class ContactMessage(Base):
    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(30))
    subject = Column(String(255))
    message = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, server_default="new")
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
