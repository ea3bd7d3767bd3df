"""Page-level access evaluation."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field

from obravista.core.enums import UserType
from obravista.core.exceptions import AuthorizationError


class AccessLevel(str, enum.Enum):
    """Ordered access levels: BLOCKED < VIEW < EDIT < MANAGE."""

    BLOCKED = "bloqueado"
    VIEW = "visualizar"
    EDIT = "editar"
    MANAGE = "gerenciar"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    # Ordered by rank, never by the string value.
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, AccessLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, AccessLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, AccessLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, AccessLevel):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: "AccessLevel | str") -> "AccessLevel":
        if isinstance(value, AccessLevel):
            return value
        normalized = value.strip().lower()
        # Stored permission maps still carry the retired "criar" level, which meant full access.
        if normalized == "criar":
            return cls.MANAGE
        return cls(normalized)


_RANKS = {
    AccessLevel.BLOCKED: 0,
    AccessLevel.VIEW: 1,
    AccessLevel.EDIT: 2,
    AccessLevel.MANAGE: 3,
}


class Action(str, enum.Enum):
    READ = "ler"
    CREATE = "criar"
    EDIT = "editar"
    DELETE = "excluir"


# Single place to tighten rights: today EDIT still carries delete.
MINIMUM_LEVEL: dict[Action, AccessLevel] = {
    Action.READ: AccessLevel.VIEW,
    Action.CREATE: AccessLevel.EDIT,
    Action.EDIT: AccessLevel.EDIT,
    Action.DELETE: AccessLevel.EDIT,
}

ALL_PAGES = (
    "dashboard",
    "obras",
    "prestadores",
    "equipes",
    "kanban",
    "relatorios",
    "usuarios",
    "produtos",
    "financeiro",
    "configuracoes",
)


@dataclass(frozen=True)
class RoleDefaults:
    pages: frozenset[str]
    level: AccessLevel


ROLE_DEFAULTS: dict[UserType, RoleDefaults] = {
    UserType.ADMIN: RoleDefaults(pages=frozenset(ALL_PAGES), level=AccessLevel.MANAGE),
    UserType.USER: RoleDefaults(
        pages=frozenset({"dashboard", "obras", "prestadores", "equipes", "kanban", "relatorios", "produtos"}),
        level=AccessLevel.VIEW,
    ),
}

MODULES: dict[str, tuple[str, ...]] = {
    "operacional": ("obras", "equipes", "kanban", "ferramentas", "catalogos"),
    "financeiro": ("financeiro", "produtos", "unidades"),
    "crm": ("crm",),
    "gestao": ("dashboard", "relatorios", "usuarios", "prestadores", "configuracoes", "tipos_prestadores"),
}


@dataclass(frozen=True)
class PermissionSubject:
    """What the evaluator needs to know about a user."""

    user_id: int
    type: UserType = UserType.USER
    custom_permissions: Mapping[str, str] = field(default_factory=dict)


def resolve_access_level(page: str, user: PermissionSubject | None) -> AccessLevel:
    """Access level of ``user`` on ``page``, evaluated fresh on every call."""
    if user is None:
        return AccessLevel.BLOCKED
    # Admins cannot lock themselves out through custom entries.
    if user.type is UserType.ADMIN:
        return AccessLevel.MANAGE
    custom = user.custom_permissions.get(page)
    if custom:
        return AccessLevel.parse(custom)
    defaults = ROLE_DEFAULTS.get(user.type, ROLE_DEFAULTS[UserType.USER])
    if page in defaults.pages:
        return defaults.level
    return AccessLevel.BLOCKED


def can_access_page(page: str, user: PermissionSubject | None) -> bool:
    return resolve_access_level(page, user) > AccessLevel.BLOCKED


def can_perform(page: str, action: Action | str, user: PermissionSubject | None) -> bool:
    """Whether ``user`` may perform ``action`` on ``page``."""
    return resolve_access_level(page, user) >= MINIMUM_LEVEL[Action(action)]


def require_action(page: str, action: Action | str, user: PermissionSubject | None) -> None:
    """Raise when ``user`` lacks rights for ``action`` on ``page``."""
    if can_perform(page, action, user):
        return
    raise AuthorizationError(f"Access denied: {Action(action).value} on {page}")


def has_module_access(module_id: str, user: PermissionSubject | None) -> bool:
    """True when at least one page in the module is not blocked for ``user``."""
    if user is None:
        return False
    if user.type is UserType.ADMIN:
        return True
    pages = MODULES.get(module_id)
    if not pages:
        return False
    return any(can_access_page(page, user) for page in pages)
