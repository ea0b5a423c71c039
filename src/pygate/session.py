import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Iterable, Optional, Union
from .events import Observable
from .models import Action, Actor, ActorSession, Decision, Role
from .permissions import Permissions
from .providers import IdentityProvider
from .registry import Registry
from .roles import RoleNotFound, RoleStore

logger = logging.getLogger(__name__)

RoleLookup = Callable[[str], Union[Optional[Role], Awaitable[Optional[Role]]]]


async def resolve(
    actor: Actor,
    role_lookup: RoleLookup,
    registry: Registry,
    generation: int = 0,
) -> ActorSession:
    """
    Union the grants of every role assigned to the actor.

    Every role must resolve and every granted code must be in the registry,
    for inactive actors too; an inactive actor then simply gets no permissions.
    """
    permissions: set[str] = set()
    for uid in actor.role_uids:
        role = role_lookup(uid)
        if inspect.isawaitable(role):
            role = await role
        if role is None:
            raise RoleNotFound(uid)
        permissions.update(registry.validate(role.permissions))

    if not actor.is_active:
        permissions.clear()

    return ActorSession(
        actor_uid=actor.uid,
        permissions=frozenset(permissions),
        is_loading=False,
        role_uids=actor.role_uids,
        is_active=actor.is_active,
        generation=generation,
    )


class SessionManager(Observable):
    """
    Owns the current ActorSession for one authenticated context.

    The session is replaced, never edited. Each refresh() takes a new
    generation number and its result is published only if no later refresh
    started meanwhile, so a slow lookup can't overwrite a newer assignment.
    Subscribers receive each published session (or None after logout).
    """

    def __init__(
        self,
        engine: Permissions,
        identity: IdentityProvider,
        roles: Union[RoleStore, RoleLookup],
    ):
        super().__init__()
        self._engine = engine
        self._identity = identity
        self._roles = roles
        self._generation = 0
        self._session: Optional[ActorSession] = ActorSession.pending()
        self._unsubscribe: list[Callable[[], None]] = []
        self._tasks: set[asyncio.Task] = set()

    @property
    def session(self) -> Optional[ActorSession]:
        return self._session

    @property
    def generation(self) -> int:
        return self._generation

    def _publish(self, session: Optional[ActorSession]) -> None:
        self._session = session
        self.notify(session)

    async def refresh(self) -> Optional[ActorSession]:
        self._generation += 1
        generation = self._generation
        previous = self._session
        self._publish(
            ActorSession.pending(previous.actor_uid if previous else None, generation)
        )

        try:
            actor = await self._identity.current_actor()
            if actor is None:
                session = None
            else:
                session = await resolve(
                    actor, self._roles, self._engine.registry, generation
                )
        except Exception:
            if generation == self._generation:
                logger.warning("session resolution %d failed", generation, exc_info=True)
                self._publish(
                    ActorSession(
                        actor_uid=previous.actor_uid if previous else None,
                        failed=True,
                        generation=generation,
                    )
                )
            raise

        if generation != self._generation:
            logger.warning(
                "discarding stale session resolution %d, %d is newer",
                generation,
                self._generation,
            )
            return self._session

        if session is None:
            logger.info("no authenticated actor")
        else:
            logger.info(
                "session %d resolved for %s with %d permissions",
                generation,
                session.actor_uid,
                len(session.permissions),
            )
        self._publish(session)
        return session

    def start(self) -> None:
        """Re-resolve whenever the identity or a role changes"""
        if self._unsubscribe:
            return
        self._unsubscribe.append(self._identity.subscribe(self._schedule_refresh))
        if isinstance(self._roles, RoleStore):
            self._unsubscribe.append(self._roles.subscribe(self._on_role_change))

    def stop(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe.clear()

    async def wait(self) -> None:
        """Wait for scheduled refreshes to settle"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def end(self) -> None:
        """Logout: drop the session and invalidate any refresh in flight"""
        self._generation += 1
        self._publish(None)

    def _on_role_change(self, uid: str) -> None:
        session = self._session
        if session is not None and uid in session.role_uids:
            self._schedule_refresh()

    def _schedule_refresh(self) -> None:
        task = asyncio.get_running_loop().create_task(self.refresh())
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            # already logged by refresh(); keep asyncio from warning again
            logger.debug("scheduled refresh failed: %s", task.exception())

    # accessors bound to the current session

    def is_loading(self) -> bool:
        return self._session is not None and self._session.is_loading

    def _anonymous(self, codes: Iterable[str]) -> Decision:
        # unknown codes are still a configuration error when signed out
        self._engine.registry.validate(codes)
        return Decision.DENIED

    def has_permission(self, code: str, action: Action = Action.VIEW) -> Decision:
        if self._session is None:
            return self._anonymous([code])
        return self._engine.check_one(self._session, code, action)

    def has_any_permission(
        self, codes: Iterable[str], action: Action = Action.VIEW
    ) -> Decision:
        if self._session is None:
            return self._anonymous(codes)
        return self._engine.check_any(self._session, codes, action)

    def has_all_permissions(
        self, codes: Iterable[str], action: Action = Action.VIEW
    ) -> Decision:
        if self._session is None:
            return self._anonymous(codes)
        return self._engine.check_all(self._session, codes, action)
