import uuid
from datetime import datetime, time, timezone

from sqlmodel import Session, col, func, select

from app.core.config import settings
from app.core.security import get_password_hash, verify_password
from app.models import (
    BotSettings,
    ChatMessage,
    ChatMessageCreate,
    Contact,
    ContactCreate,
    ContactUpdate,
    DashboardStats,
    User,
    UserCreate,
    get_datetime_utc,
)


def create_user(*, session: Session, user_create: UserCreate) -> User:
    db_obj = User.model_validate(
        user_create, update={"hashed_password": get_password_hash(user_create.password)}
    )
    session.add(db_obj)
    session.commit()
    session.refresh(db_obj)
    return db_obj


def get_user_by_email(*, session: Session, email: str) -> User | None:
    statement = select(User).where(User.email == email)
    session_user = session.exec(statement).first()
    return session_user


def list_users(*, session: Session) -> list[User]:
    return list(session.exec(select(User).order_by(col(User.created_at))).all())


def delete_user(*, session: Session, db_user: User) -> None:
    session.delete(db_user)
    session.commit()


def update_user_password(*, session: Session, db_user: User, new_password: str) -> User:
    db_user.hashed_password = get_password_hash(new_password)
    session.add(db_user)
    session.commit()
    session.refresh(db_user)
    return db_user


def record_login(*, session: Session, db_user: User) -> User:
    db_user.last_login = get_datetime_utc()
    session.add(db_user)
    session.commit()
    session.refresh(db_user)
    return db_user


# Dummy hash to use for timing attack prevention when user is not found
# This is an Argon2 hash of a random password, used to ensure constant-time comparison
DUMMY_HASH = "$argon2id$v=19$m=65536,t=3,p=4$MjQyZWE1MzBjYjJlZTI0Yw$YTU4NGM5ZTZmYjE2NzZlZjY0ZWY3ZGRkY2U2OWFjNjk"


def authenticate(*, session: Session, email: str, password: str) -> User | None:
    db_user = get_user_by_email(session=session, email=email)
    if not db_user:
        # Keep response time similar whether or not the email exists
        verify_password(password, DUMMY_HASH)
        return None
    verified, updated_password_hash = verify_password(password, db_user.hashed_password)
    if not verified:
        return None
    if updated_password_hash:
        db_user.hashed_password = updated_password_hash
        session.add(db_user)
        session.commit()
        session.refresh(db_user)
    return db_user


def create_contact(*, session: Session, contact_in: ContactCreate) -> Contact:
    db_contact = Contact.model_validate(contact_in)
    session.add(db_contact)
    session.commit()
    session.refresh(db_contact)
    return db_contact


def list_contacts(*, session: Session) -> list[Contact]:
    """Most recently active first; contacts without activity last."""
    statement = select(Contact).order_by(
        col(Contact.last_activity).is_(None), col(Contact.last_activity).desc()
    )
    return list(session.exec(statement).all())


def update_contact(*, session: Session, db_contact: Contact, contact_in: ContactUpdate) -> Contact:
    db_contact.sqlmodel_update(contact_in.model_dump(exclude_unset=True))
    session.add(db_contact)
    session.commit()
    session.refresh(db_contact)
    return db_contact


def get_bot_settings(*, session: Session) -> BotSettings | None:
    return session.exec(select(BotSettings).order_by(col(BotSettings.updated_at))).first()


def update_bot_settings(*, session: Session, prompt_system: str) -> BotSettings:
    db_settings = get_bot_settings(session=session)
    if db_settings is None:
        db_settings = BotSettings(
            prompt_system=prompt_system,
            client_name=settings.DEFAULT_CLIENT_NAME,
        )
    else:
        db_settings.prompt_system = prompt_system
        db_settings.updated_at = get_datetime_utc()
    session.add(db_settings)
    session.commit()
    session.refresh(db_settings)
    return db_settings


def create_chat_message(*, session: Session, message_in: ChatMessageCreate) -> ChatMessage:
    db_message = ChatMessage.model_validate(message_in.model_dump(exclude_none=True))
    session.add(db_message)
    session.commit()
    session.refresh(db_message)
    return db_message


def get_chat_messages(*, session: Session, contact_id: uuid.UUID) -> list[ChatMessage]:
    statement = (
        select(ChatMessage)
        .where(ChatMessage.contact_id == contact_id)
        .order_by(col(ChatMessage.timestamp))
    )
    return list(session.exec(statement).all())


def get_dashboard_stats(*, session: Session, now: datetime | None = None) -> DashboardStats:
    now = now or get_datetime_utc()
    start_of_day = datetime.combine(now.date(), time.min, tzinfo=timezone.utc)
    total_contacts = session.exec(select(func.count()).select_from(Contact)).one()
    admin_required = session.exec(
        select(func.count()).select_from(Contact).where(col(Contact.require_admin))
    ).one()
    messages_today = session.exec(
        select(func.count()).select_from(ChatMessage).where(col(ChatMessage.timestamp) >= start_of_day)
    ).one()
    return DashboardStats(
        total_contacts=total_contacts,
        admin_required=admin_required,
        messages_today=messages_today,
    )
