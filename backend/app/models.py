import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import EmailStr
from sqlalchemy import DateTime, Text
from sqlmodel import Field, SQLModel

from app.core.permissions import Role


def get_datetime_utc() -> datetime:
    return datetime.now(timezone.utc)


# Shared properties
class UserBase(SQLModel):
    email: EmailStr = Field(unique=True, index=True, max_length=255)
    name: str = Field(min_length=1, max_length=255)
    role: Role = Role.VIEWER
    is_active: bool = True


# Properties to receive via API on creation
class UserCreate(UserBase):
    password: str = Field(min_length=8, max_length=128)


# Database model, database table inferred from class name
class User(UserBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    hashed_password: str
    last_login: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


# Properties to return via API, never the password hash
class UserPublic(UserBase):
    id: uuid.UUID
    last_login: datetime | None = None
    created_at: datetime | None = None


class UsersPublic(SQLModel):
    data: list[UserPublic]
    count: int


class UpdatePassword(SQLModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=8, max_length=128)


class LoginRequest(SQLModel):
    email: EmailStr
    password: str = Field(min_length=1)


class LoginResponse(SQLModel):
    user: UserPublic
    access_token: str
    token_type: str = "bearer"


class SessionUser(SQLModel):
    user: UserPublic


# Generic message
class Message(SQLModel):
    message: str


# JSON payload containing access token
class Token(SQLModel):
    access_token: str
    token_type: str = "bearer"


# Contents of JWT token
class TokenPayload(SQLModel):
    sub: str | None = None


# WhatsApp contacts talking to the bot
class ContactBase(SQLModel):
    name: str = Field(max_length=255)
    phone_number: str = Field(unique=True, index=True, max_length=32)
    require_admin: bool = False


class ContactCreate(ContactBase):
    last_activity: datetime | None = None


class ContactUpdate(SQLModel):
    require_admin: bool


class Contact(ContactBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    last_activity: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


class ContactPublic(ContactBase):
    id: uuid.UUID
    last_activity: datetime | None = None


# Bot settings hold the system prompt in its tagged text form
class BotSettingsBase(SQLModel):
    prompt_system: str = Field(sa_type=Text)  # type: ignore
    client_name: str = Field(default="Default Client", max_length=255)
    is_active: bool = True


class BotSettingsUpdate(SQLModel):
    prompt_system: str = Field(min_length=1)


class BotSettings(BotSettingsBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    updated_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


class BotSettingsPublic(BotSettingsBase):
    id: uuid.UUID
    updated_at: datetime | None = None


class PromptPreview(SQLModel):
    prompt_system: str


# Conversation history
class ChatMessageBase(SQLModel):
    contact_id: uuid.UUID = Field(foreign_key="contact.id", index=True, ondelete="CASCADE")
    role: Literal["user", "assistant", "admin"] = Field(sa_type=Text)  # type: ignore
    content: str = Field(sa_type=Text)  # type: ignore


class ChatMessageCreate(ChatMessageBase):
    timestamp: datetime | None = None


class ChatMessage(ChatMessageBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    timestamp: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


class ChatMessagePublic(ChatMessageBase):
    id: uuid.UUID
    timestamp: datetime | None = None


class DashboardStats(SQLModel):
    total_contacts: int
    admin_required: int
    messages_today: int
