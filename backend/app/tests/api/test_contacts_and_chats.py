import uuid
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from app import crud
from app.core.config import settings
from app.core.db import engine
from app.models import ChatMessageCreate, Contact, ContactCreate, get_datetime_utc

API = settings.API_V1_STR


def _create_contact(**kwargs) -> Contact:
    values = {"name": "Customer", "phone_number": f"+{uuid.uuid4().int % 10**11:011d}"}
    values.update(kwargs)
    with Session(engine) as session:
        return crud.create_contact(session=session, contact_in=ContactCreate(**values))


@pytest.fixture(scope="module")
def conversation() -> tuple[Contact, list[str]]:
    contact = _create_contact(name="Chatty Customer", last_activity=get_datetime_utc())
    started_at = get_datetime_utc() - timedelta(hours=1)
    # inserted out of order on purpose
    messages = [
        (2, "assistant", "Claro, te paso con ventas."),
        (0, "user", "Hola, ¿precios?"),
        (1, "assistant", "¡Hola! ¿Qué producto te interesa?"),
    ]
    with Session(engine) as session:
        for minute, role, content in messages:
            crud.create_chat_message(
                session=session,
                message_in=ChatMessageCreate(
                    contact_id=contact.id,
                    role=role,
                    content=content,
                    timestamp=started_at + timedelta(minutes=minute),
                ),
            )
    ordered = [content for _, _, content in sorted(messages)]
    return contact, ordered


def test_viewer_lists_contacts_most_recent_first(client: TestClient, viewer_token_headers):
    now = get_datetime_utc()
    older = _create_contact(name="Older", last_activity=now - timedelta(days=2))
    newer = _create_contact(name="Newer", last_activity=now + timedelta(minutes=5))
    idle = _create_contact(name="Idle")

    r = client.get(f"{API}/contacts/", headers=viewer_token_headers)

    assert r.status_code == 200
    ids = [contact["id"] for contact in r.json()]
    assert ids.index(str(newer.id)) < ids.index(str(older.id)) < ids.index(str(idle.id))


def test_viewer_cannot_flag_contact(client: TestClient, viewer_token_headers):
    contact = _create_contact()

    r = client.patch(
        f"{API}/contacts/{contact.id}", headers=viewer_token_headers, json={"require_admin": True}
    )

    assert r.status_code == 403


def test_editor_flags_contact_for_admin(client: TestClient, editor_token_headers):
    contact = _create_contact()

    r = client.patch(
        f"{API}/contacts/{contact.id}", headers=editor_token_headers, json={"require_admin": True}
    )

    assert r.status_code == 200
    assert r.json()["require_admin"] is True


def test_flagging_unknown_contact_returns_404(client: TestClient, editor_token_headers):
    r = client.patch(
        f"{API}/contacts/{uuid.uuid4()}", headers=editor_token_headers, json={"require_admin": False}
    )

    assert r.status_code == 404


def test_contacts_require_authentication(client: TestClient):
    assert client.get(f"{API}/contacts/").status_code == 401


def test_chat_history_is_ordered_oldest_first(client: TestClient, viewer_token_headers, conversation):
    contact, ordered = conversation

    r = client.get(f"{API}/chats/", headers=viewer_token_headers, params={"contact_id": str(contact.id)})

    assert r.status_code == 200
    assert [message["content"] for message in r.json()] == ordered


def test_chat_history_requires_contact_id(client: TestClient, viewer_token_headers):
    r = client.get(f"{API}/chats/", headers=viewer_token_headers)

    assert r.status_code == 400
    assert r.json()["detail"] == "Contact ID is required"


def test_dashboard_stats_count_new_activity(client: TestClient, viewer_token_headers):
    before = client.get(f"{API}/dashboard/stats", headers=viewer_token_headers).json()

    contact = _create_contact(require_admin=True)
    with Session(engine) as session:
        crud.create_chat_message(
            session=session,
            message_in=ChatMessageCreate(contact_id=contact.id, role="user", content="Hola"),
        )

    after = client.get(f"{API}/dashboard/stats", headers=viewer_token_headers).json()
    assert after["total_contacts"] == before["total_contacts"] + 1
    assert after["admin_required"] == before["admin_required"] + 1
    assert after["messages_today"] == before["messages_today"] + 1


def test_health_check(client: TestClient):
    r = client.get(f"{API}/utils/health-check/")

    assert r.status_code == 200
    assert r.json() is True
