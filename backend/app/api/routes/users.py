import logging
import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException

from app import crud
from app.api.deps import SessionDep, require_capability
from app.core.permissions import Capability
from app.models import Message, User, UserCreate, UserPublic, UsersPublic

router = APIRouter()
logger = logging.getLogger(__name__)

AdminUser = Annotated[User, Depends(require_capability(Capability.MANAGE_USERS))]


@router.get("/", response_model=UsersPublic)
def read_users(session: SessionDep, current_user: AdminUser) -> Any:
    """
    Retrieve the team members.
    """
    users = crud.list_users(session=session)
    return UsersPublic(data=[UserPublic.model_validate(user) for user in users], count=len(users))


@router.post("/", response_model=UserPublic, status_code=201)
def create_user(*, session: SessionDep, current_user: AdminUser, user_in: UserCreate) -> Any:
    """
    Create new user.
    """
    user = crud.get_user_by_email(session=session, email=user_in.email)
    if user:
        raise HTTPException(
            status_code=409,
            detail="The user with this email already exists in the system.",
        )
    user = crud.create_user(session=session, user_create=user_in)
    logger.info("User %s created %s with role %s", current_user.email, user.email, user.role.value)
    return user


@router.delete("/{user_id}", response_model=Message)
def delete_user(session: SessionDep, current_user: AdminUser, user_id: uuid.UUID) -> Any:
    """
    Delete a user.
    """
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.id == current_user.id:
        raise HTTPException(status_code=400, detail="Users cannot delete themselves")
    crud.delete_user(session=session, db_user=user)
    return Message(message="User deleted successfully")
