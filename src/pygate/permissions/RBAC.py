import logging
from .permissions import Permissions
from ..models import Action, ActionMatching, Decision, ActorSession
from ..registry import Registry

logger = logging.getLogger(__name__)


class RBAC(Permissions):
    """
    Role based decision engine over a resolved ActorSession.

    Checks are pure: no I/O, no mutation, same answer for the same inputs.
    A loading session yields PENDING before codes are looked at; once loaded,
    a code missing from the registry raises UnknownPermission instead of
    quietly becoming DENIED.
    """

    def __init__(
        self,
        registry: Registry,
        action_matching: ActionMatching = ActionMatching.IGNORE,
    ):
        super().__init__(registry)
        self._action_matching = ActionMatching(action_matching)

    @property
    def action_matching(self) -> ActionMatching:
        return self._action_matching

    def _granted(self, session: ActorSession, code: str, action: Action) -> bool:
        entry = self._registry.entry(code)
        if code not in session.permissions:
            return False
        if self._action_matching is ActionMatching.STRICT:
            return entry.action is None or entry.action == action
        return True

    def check_one(self, session, code, action=Action.VIEW) -> Decision:
        if session.is_loading:
            return Decision.PENDING
        action = self.parse_action(action)
        decision = (
            Decision.ALLOWED if self._granted(session, code, action) else Decision.DENIED
        )
        logger.debug(
            "check_one %s.%s for %s -> %s",
            code,
            action.value,
            session.actor_uid,
            decision.value,
        )
        return decision

    def check_any(self, session, codes, action=Action.VIEW) -> Decision:
        if session.is_loading:
            return Decision.PENDING
        action = self.parse_action(action)
        codes = list(codes)
        # every code is validated, not just the ones before the first match
        granted = [self._granted(session, code, action) for code in codes]
        return Decision.ALLOWED if any(granted) else Decision.DENIED

    def check_all(self, session, codes, action=Action.VIEW) -> Decision:
        if session.is_loading:
            return Decision.PENDING
        action = self.parse_action(action)
        codes = list(codes)
        granted = [self._granted(session, code, action) for code in codes]
        # an empty requirement is satisfied
        return Decision.ALLOWED if all(granted) else Decision.DENIED
