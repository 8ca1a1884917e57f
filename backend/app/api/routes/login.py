import logging
from datetime import timedelta
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.security import OAuth2PasswordRequestForm

from app import crud
from app.api.deps import CurrentUser, SessionDep
from app.core import security
from app.core.config import settings
from app.models import (
    LoginRequest,
    LoginResponse,
    Message,
    SessionUser,
    Token,
    UpdatePassword,
    User,
    UserPublic,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _login(session: SessionDep, email: str, password: str) -> tuple[User, str]:
    user = crud.authenticate(session=session, email=email, password=password)
    if not user:
        logger.info("Rejected login for %s", email)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account is inactive")
    user = crud.record_login(session=session, db_user=user)
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    token = security.create_access_token(user.id, expires_delta=access_token_expires)
    return user, token


@router.post("/login/access-token")
def login_access_token(
    session: SessionDep, form_data: Annotated[OAuth2PasswordRequestForm, Depends()]
) -> Token:
    """
    OAuth2 compatible token login, get an access token for future requests
    """
    _, token = _login(session, form_data.username, form_data.password)
    return Token(access_token=token)


@router.post("/auth/login", response_model=LoginResponse)
def login(session: SessionDep, response: Response, body: LoginRequest) -> Any:
    """
    Log in with email and password; the token is also set as an httpOnly cookie.
    """
    user, token = _login(session, body.email, body.password)
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return LoginResponse(user=UserPublic.model_validate(user), access_token=token)


@router.post("/auth/logout", response_model=Message)
def logout(response: Response) -> Any:
    response.delete_cookie(settings.AUTH_COOKIE_NAME)
    return Message(message="Logged out successfully")


@router.get("/auth/me", response_model=SessionUser)
def read_session_user(current_user: CurrentUser) -> Any:
    return SessionUser(user=UserPublic.model_validate(current_user))


@router.post("/auth/change-password", response_model=Message)
def change_password(
    *, session: SessionDep, body: UpdatePassword, current_user: CurrentUser
) -> Any:
    """
    Update own password.
    """
    verified, _ = security.verify_password(body.current_password, current_user.hashed_password)
    if not verified:
        raise HTTPException(status_code=400, detail="Incorrect password")
    if body.current_password == body.new_password:
        raise HTTPException(
            status_code=400, detail="New password cannot be the same as the current one"
        )
    crud.update_user_password(session=session, db_user=current_user, new_password=body.new_password)
    logger.info("User %s changed their password", current_user.id)
    return Message(message="Password updated successfully")
