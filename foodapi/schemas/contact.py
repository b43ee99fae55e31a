from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class MessageStatus(str, Enum):
    NEW = "new"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"


class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    phone: str | None = Field(None, max_length=30)
    subject: str | None = Field(None, max_length=255)
    message: str = Field(..., min_length=1)

    @field_validator("name", "email", "message", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def _email_shape(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError("Invalid email address")
        return value


class StatusUpdate(BaseModel):
    status: MessageStatus


class ContactResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str | None = None
    subject: str | None = None
    message: str
    status: MessageStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContactListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[ContactResponse]


class ContactDetailResponse(BaseModel):
    success: bool = True
    message: str | None = None
    data: ContactResponse


class ContactStats(BaseModel):
    total: int
    new: int
    read: int
    replied: int
    archived: int


class ContactStatsResponse(BaseModel):
    success: bool = True
    data: ContactStats
