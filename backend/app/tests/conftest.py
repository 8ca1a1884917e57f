import os

os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["ENVIRONMENT"] = "local"

from collections.abc import Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.core.db import engine, init_db  # noqa: E402
from app.core.permissions import Role  # noqa: E402
from app.main import app  # noqa: E402
from app.tests.utils import TEST_PASSWORD, ensure_user, get_token_headers  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def db() -> Generator[None, None, None]:
    with Session(engine) as session:
        init_db(session)
    yield


@pytest.fixture(scope="module")
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="module")
def superuser_token_headers(client: TestClient) -> dict[str, str]:
    return get_token_headers(client, settings.FIRST_SUPERUSER, settings.FIRST_SUPERUSER_PASSWORD)


@pytest.fixture(scope="module")
def editor_token_headers(client: TestClient) -> dict[str, str]:
    ensure_user("editor@company.com", Role.EDITOR)
    return get_token_headers(client, "editor@company.com", TEST_PASSWORD)


@pytest.fixture(scope="module")
def viewer_token_headers(client: TestClient) -> dict[str, str]:
    ensure_user("viewer@company.com", Role.VIEWER)
    return get_token_headers(client, "viewer@company.com", TEST_PASSWORD)
