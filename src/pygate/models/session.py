from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ActorSession:
    """
    Materialized, read-only view of what an actor may do.

    A session is never edited: a role change or a new login produces a new
    instance, so a reader holding one always sees a complete permission set.
    `is_loading` is fixed per instance; a pending instance is later replaced,
    not flipped.
    """

    actor_uid: Optional[str]
    permissions: frozenset[str] = frozenset()
    is_loading: bool = False
    role_uids: tuple[str, ...] = ()
    is_active: bool = True
    # resolution finished with an error; permissions are empty
    failed: bool = False
    generation: int = 0
    resolved_at: datetime = field(default_factory=datetime.now, compare=False)

    @classmethod
    def pending(cls, actor_uid: Optional[str] = None, generation: int = 0) -> "ActorSession":
        return cls(actor_uid=actor_uid, is_loading=True, generation=generation)

    def has(self, code: str) -> bool:
        return code in self.permissions
