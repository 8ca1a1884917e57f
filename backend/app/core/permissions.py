from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"


class Capability(str, Enum):
    VIEW_DASHBOARD = "view_dashboard"
    VIEW_CONTACTS = "view_contacts"
    EDIT_CONTACTS = "edit_contacts"
    VIEW_CHATS = "view_chats"
    VIEW_PROMPT = "view_prompt"
    EDIT_PROMPT = "edit_prompt"
    MANAGE_USERS = "manage_users"


_READ_ONLY = frozenset(
    {
        Capability.VIEW_DASHBOARD,
        Capability.VIEW_CONTACTS,
        Capability.VIEW_CHATS,
        Capability.VIEW_PROMPT,
    }
)

ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.VIEWER: _READ_ONLY,
    Role.EDITOR: _READ_ONLY | {Capability.EDIT_CONTACTS, Capability.EDIT_PROMPT},
    Role.ADMIN: frozenset(Capability),
}


def has_capability(role: Role | str | None, capability: Capability) -> bool:
    """Whether ``role`` grants ``capability``; unknown roles grant nothing."""
    if role is None:
        return False
    try:
        role = Role(role)
    except ValueError:
        return False
    return capability in ROLE_CAPABILITIES[role]
