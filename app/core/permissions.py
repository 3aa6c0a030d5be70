from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional
from uuid import UUID


class PERMISSIONS:
    """Named permissions that can be granted to a role."""
    STAFF_INCENTIVES_MANAGE = "staff_incentives:manage"


class AuthorizationResult(str, Enum):
    AUTHORIZED = "authorized"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass
class RequestContext:
    """Caller identity and granted permissions for a single request.

    ``permissions`` is None when there is no usable session (no token, an
    invalid token, or a user without a role).
    """
    user_id: Optional[UUID] = None
    permissions: Optional[List[str]] = field(default=None)

    @classmethod
    def anonymous(cls) -> "RequestContext":
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None and self.permissions is not None


def has_permission(user_permissions: Iterable[str], permission: str) -> bool:
    return permission in set(user_permissions or ())


def check_permission(context: Optional[RequestContext], permission: str) -> AuthorizationResult:
    if context is None or not context.is_authenticated:
        return AuthorizationResult.UNAUTHENTICATED
    if not has_permission(context.permissions, permission):
        return AuthorizationResult.FORBIDDEN
    return AuthorizationResult.AUTHORIZED
