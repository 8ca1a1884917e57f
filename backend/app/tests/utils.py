from fastapi.testclient import TestClient
from sqlmodel import Session

from app import crud
from app.core.config import settings
from app.core.db import engine
from app.core.permissions import Role
from app.models import UserCreate

TEST_PASSWORD = "password1234"


def ensure_user(email: str, role: Role, *, is_active: bool = True) -> None:
    with Session(engine) as session:
        if crud.get_user_by_email(session=session, email=email) is None:
            crud.create_user(
                session=session,
                user_create=UserCreate(
                    email=email,
                    name=email.split("@")[0].title(),
                    role=role,
                    is_active=is_active,
                    password=TEST_PASSWORD,
                ),
            )


def get_token_headers(client: TestClient, email: str, password: str) -> dict[str, str]:
    r = client.post(
        f"{settings.API_V1_STR}/login/access-token",
        data={"username": email, "password": password},
    )
    tokens = r.json()
    return {"Authorization": f"Bearer {tokens['access_token']}"}
