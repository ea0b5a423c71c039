from .model import Model, MissingDefault, CurrentTimeStamp
from .action import Action, Decision, ActionMatching
from .actor import Actor
from .role import Role
from .session import ActorSession

__all__ = [
    "Model",
    "MissingDefault",
    "CurrentTimeStamp",
    "Action",
    "Decision",
    "ActionMatching",
    "Actor",
    "Role",
    "ActorSession",
]
