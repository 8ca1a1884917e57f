import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException

from app import crud
from app.api.deps import SessionDep, require_capability
from app.core.permissions import Capability
from app.models import ChatMessagePublic, User

router = APIRouter()


@router.get("/", response_model=list[ChatMessagePublic])
def read_chat_messages(
    session: SessionDep,
    current_user: Annotated[User, Depends(require_capability(Capability.VIEW_CHATS))],
    contact_id: uuid.UUID | None = None,
) -> Any:
    """
    Conversation history of a contact, oldest message first.
    """
    if contact_id is None:
        raise HTTPException(status_code=400, detail="Contact ID is required")
    return crud.get_chat_messages(session=session, contact_id=contact_id)
