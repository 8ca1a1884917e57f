import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException

from app import crud
from app.api.deps import SessionDep, require_capability
from app.core.permissions import Capability
from app.models import Contact, ContactPublic, ContactUpdate, User

router = APIRouter()


@router.get("/", response_model=list[ContactPublic])
def read_contacts(
    session: SessionDep,
    current_user: Annotated[User, Depends(require_capability(Capability.VIEW_CONTACTS))],
) -> Any:
    return crud.list_contacts(session=session)


@router.patch("/{id}", response_model=ContactPublic)
def update_contact(
    *,
    session: SessionDep,
    current_user: Annotated[User, Depends(require_capability(Capability.EDIT_CONTACTS))],
    id: uuid.UUID,
    contact_in: ContactUpdate,
) -> Any:
    """
    Toggle whether a contact needs a human administrator.
    """
    contact = session.get(Contact, id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    return crud.update_contact(session=session, db_contact=contact, contact_in=contact_in)
