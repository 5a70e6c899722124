from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel

from app.core.entity_store import EntityStore
from app.db.remote import RemoteBoard


class AuthenticatedUser(BaseModel):
    id: str
    email: Optional[str] = None


@dataclass
class BoardContext:
    """Everything one user's board operations need: who, local state, remote tables."""
    user: AuthenticatedUser
    remote: RemoteBoard  # already scoped to `user`
    store: EntityStore = field(default_factory=EntityStore)

    @classmethod
    def open(cls, user: AuthenticatedUser, remote: RemoteBoard) -> "BoardContext":
        return cls(user=user, remote=remote.for_user(user.id))
