from abc import ABC, abstractmethod
from typing import Iterable
from ..models import Action, Decision, ActorSession
from ..registry import Registry, ConfigurationError


class Permissions(ABC):
    """
    Decision engine contract. Every guard, wrapper and bound accessor goes
    through these three checks so any/all semantics live in one place.
    """

    def __init__(self, registry: Registry):
        self._registry = registry

    @property
    def registry(self) -> Registry:
        return self._registry

    @abstractmethod
    def check_one(
        self, session: ActorSession, code: str, action: Action = Action.VIEW
    ) -> Decision:
        pass

    @abstractmethod
    def check_any(
        self, session: ActorSession, codes: Iterable[str], action: Action = Action.VIEW
    ) -> Decision:
        pass

    @abstractmethod
    def check_all(
        self, session: ActorSession, codes: Iterable[str], action: Action = Action.VIEW
    ) -> Decision:
        pass

    @staticmethod
    def parse_action(action) -> Action:
        if isinstance(action, Action):
            return action
        try:
            return Action(action)
        except ValueError:
            raise InvalidPermissionAction(action) from None


class InvalidPermissionAction(ConfigurationError):
    def __init__(self, action=None, *args):
        self.action = action
        super().__init__(f"invalid permission action {action!r}", *args)
