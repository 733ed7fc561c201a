import enum

from backend.exceptions import Forbidden
from users.choices import Role


class Capability(enum.Enum):
    MANAGE_CATALOG = "manage_catalog"
    MANAGE_ORDERS = "manage_orders"
    MANAGE_USERS = "manage_users"


ROLE_CAPABILITIES = {
    Role.ORDINARY: frozenset(),
    Role.ADMIN: frozenset(
        {Capability.MANAGE_CATALOG, Capability.MANAGE_ORDERS, Capability.MANAGE_USERS}
    ),
}


def has_capability(role, capability):
    try:
        role = Role(role)
    except ValueError:
        return False
    return capability in ROLE_CAPABILITIES[role]


def require_capability(identity, capability):
    if identity is None or not has_capability(identity.role, capability):
        raise Forbidden("Forbidden: Admin only.")
