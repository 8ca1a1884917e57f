import logging
from datetime import timedelta

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app import crud
from app.core.config import settings
from app.core.permissions import Role
from app.models import (
    BotSettings,
    ChatMessageCreate,
    ContactCreate,
    UserCreate,
    get_datetime_utc,
)

logger = logging.getLogger(__name__)


def build_engine(database_uri: str):
    if database_uri.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if database_uri in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(database_uri, connect_args=connect_args, poolclass=StaticPool)
        return create_engine(database_uri, connect_args=connect_args)
    return create_engine(database_uri, pool_pre_ping=True)


engine = build_engine(settings.SQLALCHEMY_DATABASE_URI)


DEMO_PROMPT = """<assistant>
  <role>Asistente virtual de Acme Corporation</role>
  <purpose>Atender consultas de clientes por WhatsApp y derivarlas al equipo correcto</purpose>
  <core_rules>
    <rule>Responde siempre con cortesía y profesionalismo.</rule>
    <rule>Si no conoces la respuesta, admítelo y ofrece contactar a una persona.</rule>
  </core_rules>
  <behavior_rules>
    <rule>Deriva las consultas de precios al equipo de ventas.</rule>
  </behavior_rules>
  <contacts>
    <casa_central>
      <name>Equipo de ventas</name>
      <phone>+1234567890</phone>
      <email>ventas@company.com</email>
    </casa_central>
  </contacts>
  <company>
    <about>Acme Corporation ofrece soluciones de software para pymes.</about>
    <services>
      <service>Implementación</service>
      <service>Soporte técnico</service>
    </services>
    <locations>
      <location>
        <location_name>Casa Central</location_name>
        <location_address>Av. Principal 123</location_address>
        <location_hours>Lunes a viernes de 9 a 18</location_hours>
      </location>
    </locations>
  </company>
</assistant>"""


def _seed_demo_data(session: Session) -> None:
    now = get_datetime_utc()
    for email, name, role, is_active in (
        ("editor@company.com", "Sarah Miller", Role.EDITOR, True),
        ("viewer@company.com", "Mike Johnson", Role.VIEWER, False),
    ):
        if crud.get_user_by_email(session=session, email=email) is None:
            crud.create_user(
                session=session,
                user_create=UserCreate(
                    email=email,
                    name=name,
                    role=role,
                    is_active=is_active,
                    password=settings.FIRST_SUPERUSER_PASSWORD,
                ),
            )

    if crud.list_contacts(session=session):
        return

    customer = crud.create_contact(
        session=session,
        contact_in=ContactCreate(
            name="John Customer",
            phone_number="+1234567890",
            last_activity=now - timedelta(hours=2),
        ),
    )
    crud.create_contact(
        session=session,
        contact_in=ContactCreate(
            name="Sarah Customer",
            phone_number="+1987654321",
            require_admin=True,
            last_activity=now - timedelta(days=1),
        ),
    )

    conversation = (
        ("assistant", "Hello! How can I help you today?"),
        ("user", "Hi, I'm interested in your pricing plans."),
        ("assistant", "Great! Let me connect you with our sales team."),
        ("user", "That would be perfect, thanks!"),
    )
    started_at = now - timedelta(hours=4)
    for minute, (role, content) in enumerate(conversation):
        crud.create_chat_message(
            session=session,
            message_in=ChatMessageCreate(
                contact_id=customer.id,
                role=role,
                content=content,
                timestamp=started_at + timedelta(minutes=minute * 2),
            ),
        )


def init_db(session: Session) -> None:
    SQLModel.metadata.create_all(session.get_bind())

    user = crud.get_user_by_email(session=session, email=settings.FIRST_SUPERUSER)
    if not user:
        logger.info("Creating first superuser %s", settings.FIRST_SUPERUSER)
        crud.create_user(
            session=session,
            user_create=UserCreate(
                email=settings.FIRST_SUPERUSER,
                name=settings.FIRST_SUPERUSER_NAME,
                role=Role.ADMIN,
                password=settings.FIRST_SUPERUSER_PASSWORD,
            ),
        )

    if settings.SEED_DEMO_DATA:
        logger.info("Seeding demo users, contacts and conversation")
        _seed_demo_data(session)
        if crud.get_bot_settings(session=session) is None:
            session.add(BotSettings(prompt_system=DEMO_PROMPT, client_name="Acme Corporation"))
            session.commit()
