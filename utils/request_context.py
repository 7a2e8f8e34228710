from dataclasses import dataclass
from typing import Any, Dict, Optional
from uuid import uuid4


def new_correlation_id() -> str:
    return uuid4().hex[:12]


@dataclass(frozen=True)
class AuthenticatedUser:
    user_id: str
    email: Optional[str] = None
    username: Optional[str] = None


@dataclass(frozen=True)
class RequestContext:
    """
    Per-request values passed explicitly into every service call.

    Replaces process-wide correlation id state: two concurrent requests never
    share a context.
    """
    correlation_id: str
    user: AuthenticatedUser

    @classmethod
    def for_user(cls, user: AuthenticatedUser, correlation_id: Optional[str] = None) -> "RequestContext":
        return cls(correlation_id=correlation_id or new_correlation_id(), user=user)

    @property
    def user_id(self) -> str:
        return self.user.user_id

    def log_extra(self, **fields: Any) -> Dict[str, Any]:
        extra: Dict[str, Any] = {
            "correlation_id": self.correlation_id,
            "user_id": self.user.user_id,
        }
        extra.update(fields)
        return extra
