from dataclasses import dataclass, field
from typing import Any, Iterable


@dataclass(frozen=True)
class Actor:
    """An authenticated identity (user, api key) and the roles assigned to it."""

    uid: str
    name: str = ""
    role_uids: tuple[str, ...] = ()
    is_active: bool = True
    metadata: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    def __post_init__(self):
        # keep assignment order, drop repeats
        object.__setattr__(self, "role_uids", tuple(dict.fromkeys(self.role_uids)))

    @classmethod
    def from_dict(cls, data: dict) -> "Actor":
        role_uids: Iterable = data.get("role_uids") or data.get("roles") or ()
        if not role_uids and data.get("role_id") is not None:
            role_uids = (data["role_id"],)
        known = {"uid", "id", "name", "full_name", "username", "role_uids", "roles", "role_id", "is_active"}
        return cls(
            uid=str(data.get("uid", data.get("id"))),
            name=data.get("name") or data.get("full_name") or data.get("username") or "",
            role_uids=tuple(str(r) for r in role_uids),
            is_active=bool(data.get("is_active", True)),
            metadata={k: v for k, v in data.items() if k not in known},
        )
