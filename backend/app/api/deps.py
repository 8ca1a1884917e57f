import logging
import uuid
from collections.abc import Callable, Generator
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import ValidationError
from sqlmodel import Session

from app.core.config import settings
from app.core.db import engine
from app.core.permissions import Capability, has_capability
from app.core.security import decode_access_token
from app.models import TokenPayload, User

logger = logging.getLogger(__name__)

reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/login/access-token",
    auto_error=False,
)


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_db)]
TokenDep = Annotated[str | None, Depends(reusable_oauth2)]


def get_current_user(request: Request, session: SessionDep, token: TokenDep) -> User:
    """Resolve the user from the bearer token, falling back to the auth cookie."""
    token = token or request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    try:
        token_data = TokenPayload(**decode_access_token(token))
        user_id = uuid.UUID(token_data.sub or "")
    except (jwt.InvalidTokenError, ValidationError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )
    user = session.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or inactive user",
        )
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def require_capability(capability: Capability) -> Callable[[User], User]:
    """Dependency factory checking the current user's role against ``capability``."""

    def checker(current_user: CurrentUser) -> User:
        if not has_capability(current_user.role, capability):
            logger.info(
                "User %s with role %s denied %s", current_user.email, current_user.role, capability.value
            )
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return current_user

    return checker
