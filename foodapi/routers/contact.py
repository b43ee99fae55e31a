import logging

from fastapi import APIRouter, Depends, Request, status

from foodapi.dependencies import get_contact_repository
from foodapi.errors import ErrorType
from foodapi.exceptions import AppException, server_error
from foodapi.repositories.contact_repository import ContactRepository
from foodapi.routers.forms import parse_model, read_payload
from foodapi.schemas.common import MessageResponse
from foodapi.schemas.contact import (
    ContactCreate,
    ContactDetailResponse,
    ContactListResponse,
    ContactStatsResponse,
    MessageStatus,
    StatusUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contact", tags=["contact"])

MESSAGE_NOT_FOUND = "Message not found"


async def _get_existing(repo: ContactRepository, message_id: int) -> dict:
    try:
        message = await repo.find_by_id(message_id)
    except Exception as e:
        logger.error(f"Get contact message error: {e}", exc_info=True)
        raise server_error(e) from e

    if not message:
        raise AppException(ErrorType.NOT_FOUND, MESSAGE_NOT_FOUND)
    return message


@router.post("", response_model=ContactDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_contact_message(request: Request, repo: ContactRepository = Depends(get_contact_repository)):
    data, _ = await read_payload(request)
    message_in = parse_model(ContactCreate, data)

    try:
        message = await repo.create(message_in.model_dump())
    except Exception as e:
        logger.error(f"Create contact message error: {e}", exc_info=True)
        raise server_error(e) from e

    logger.info(f"Contact message {message['id']} received from {message_in.email}")
    return {"success": True, "message": "Message sent successfully", "data": message}


@router.get("/messages", response_model=ContactListResponse)
async def list_contact_messages(
    status: MessageStatus | None = None,
    repo: ContactRepository = Depends(get_contact_repository),
):
    try:
        messages = await repo.find_all(status.value if status else None)
    except Exception as e:
        logger.error(f"Get contact messages error: {e}", exc_info=True)
        raise server_error(e) from e

    return {"success": True, "count": len(messages), "data": messages}


@router.get("/messages/{message_id}", response_model=ContactDetailResponse)
async def get_contact_message(message_id: int, repo: ContactRepository = Depends(get_contact_repository)):
    message = await _get_existing(repo, message_id)
    return {"success": True, "data": message}


@router.put("/messages/{message_id}/status", response_model=ContactDetailResponse)
async def update_message_status(
    message_id: int,
    request: Request,
    repo: ContactRepository = Depends(get_contact_repository),
):
    await _get_existing(repo, message_id)
    data, _ = await read_payload(request)
    update = parse_model(StatusUpdate, data)

    try:
        message = await repo.update_status(message_id, update.status.value)
    except Exception as e:
        logger.error(f"Update contact message status error: {e}", exc_info=True)
        raise server_error(e) from e

    logger.info(f"Contact message {message_id} marked {update.status.value}")
    return {"success": True, "message": "Message status updated", "data": message}


@router.delete("/messages/{message_id}", response_model=MessageResponse)
async def delete_contact_message(message_id: int, repo: ContactRepository = Depends(get_contact_repository)):
    await _get_existing(repo, message_id)

    try:
        await repo.delete(message_id)
    except Exception as e:
        logger.error(f"Delete contact message error: {e}", exc_info=True)
        raise server_error(e) from e

    return {"success": True, "message": "Message deleted successfully"}


@router.get("/stats", response_model=ContactStatsResponse)
async def get_contact_stats(repo: ContactRepository = Depends(get_contact_repository)):
    try:
        stats = await repo.stats()
    except Exception as e:
        logger.error(f"Get contact stats error: {e}", exc_info=True)
        raise server_error(e) from e

    return {"success": True, "data": stats}
