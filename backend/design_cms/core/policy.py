"""Authorization policy.

Maps a (principal, action) pair to a decision. The principal is built from the
session by `design_cms.api.deps`; nothing here touches storage.
"""
import enum
from dataclasses import dataclass

ADMIN_ROLE = "admin"
EDITOR_ROLE = "editor"
ROLES = (ADMIN_ROLE, EDITOR_ROLE)


class Action(str, enum.Enum):
    READ = "read"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    GENERATE = "generate"
    MANAGE_SETTINGS = "manage_settings"


class Decision(str, enum.Enum):
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Principal:
    subject: str
    role: str
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


ANONYMOUS_ACTIONS = frozenset({Action.READ})

ROLE_ACTIONS: dict[str, frozenset[Action]] = {
    ADMIN_ROLE: frozenset(Action),
    EDITOR_ROLE: frozenset({Action.READ, Action.CREATE, Action.EDIT, Action.GENERATE}),
}


def evaluate(principal: Principal | None, action: Action) -> Decision:
    if action in ANONYMOUS_ACTIONS:
        return Decision.ALLOW
    if principal is None:
        return Decision.UNAUTHENTICATED
    if action in ROLE_ACTIONS.get(principal.role, frozenset()):
        return Decision.ALLOW
    return Decision.FORBIDDEN


def is_allowed(principal: Principal | None, action: Action) -> bool:
    return evaluate(principal, action) is Decision.ALLOW
