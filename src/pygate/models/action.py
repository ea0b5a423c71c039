from enum import Enum


class Action(str, Enum):
    """
    Every guarded call site names the action it needs. Whether the action takes
    part in matching a code is decided by the engine's ActionMatching policy.
    """

    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    APPROVE = "approve"


class Decision(str, Enum):
    ALLOWED = "allowed"
    DENIED = "denied"
    # session still resolving: neither allowed nor denied yet
    PENDING = "pending"

    def __bool__(self) -> bool:
        return self is Decision.ALLOWED

    @property
    def is_pending(self) -> bool:
        return self is Decision.PENDING


class ActionMatching(str, Enum):
    # action is documented at the call site but does not affect matching
    IGNORE = "ignore"
    # a code whose verb implies an action only grants that action
    STRICT = "strict"
