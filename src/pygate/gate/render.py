import functools
import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional
from ..models import Action, Decision
from ..session import SessionManager


class Outcome(str, Enum):
    LOADING = "loading"
    CONTENT = "content"
    FALLBACK = "fallback"
    DENIED_MESSAGE = "denied_message"
    NOTHING = "nothing"


class Loading:
    """Placeholder returned while the session is still resolving."""

    def __repr__(self):
        return "<loading>"

    def __bool__(self):
        return False


LOADING = Loading()


@dataclass(frozen=True)
class Rendered:
    outcome: Outcome
    decision: Decision
    content: Any = None
    message: Optional[str] = None


def _produce(value, *args, **kwargs):
    # callables are evaluated only when their branch is chosen
    return value(*args, **kwargs) if callable(value) else value


class Gate:
    """
    Maps decisions to what a view shows.

    guard / guard_any / guard_all share one mapping and differ only in which
    engine check feeds it. The with_* decorators apply the same mapping to a
    callable but never produce an inline denial message.
    """

    def __init__(self, sessions: SessionManager, loading: Any = LOADING):
        self._sessions = sessions
        self.loading = loading

    def _render(
        self,
        decision: Decision,
        content,
        fallback,
        show_message: bool,
        message: str,
    ) -> Rendered:
        if decision is Decision.PENDING:
            return Rendered(Outcome.LOADING, decision, content=self.loading)
        if decision is Decision.ALLOWED:
            return Rendered(Outcome.CONTENT, decision, content=_produce(content))
        if fallback is not None:
            return Rendered(Outcome.FALLBACK, decision, content=_produce(fallback))
        if show_message:
            return Rendered(Outcome.DENIED_MESSAGE, decision, message=message)
        return Rendered(Outcome.NOTHING, decision)

    def guard(
        self,
        code: str,
        content,
        action: Action = Action.VIEW,
        fallback=None,
        show_message: bool = True,
    ) -> Rendered:
        action = Action(action)
        return self._render(
            self._sessions.has_permission(code, action),
            content,
            fallback,
            show_message,
            "You don't have permission to access this resource. "
            f"Required: {code}.{action.value}",
        )

    def guard_any(
        self,
        codes: Iterable[str],
        content,
        action: Action = Action.VIEW,
        fallback=None,
        show_message: bool = True,
    ) -> Rendered:
        action = Action(action)
        codes = list(codes)
        return self._render(
            self._sessions.has_any_permission(codes, action),
            content,
            fallback,
            show_message,
            "You don't have permission to access this resource. "
            f"Required any of: {', '.join(codes)}.{action.value}",
        )

    def guard_all(
        self,
        codes: Iterable[str],
        content,
        action: Action = Action.VIEW,
        fallback=None,
        show_message: bool = True,
    ) -> Rendered:
        action = Action(action)
        codes = list(codes)
        return self._render(
            self._sessions.has_all_permissions(codes, action),
            content,
            fallback,
            show_message,
            "You don't have all required permissions. "
            f"Required all of: {', '.join(codes)}.{action.value}",
        )

    def with_permission(self, code: str, action: Action = Action.VIEW, fallback=None):
        return self._wrap(lambda: self._sessions.has_permission(code, action), fallback)

    def with_any_permission(
        self, codes: Iterable[str], action: Action = Action.VIEW, fallback=None
    ):
        codes = list(codes)
        return self._wrap(
            lambda: self._sessions.has_any_permission(codes, action), fallback
        )

    def with_all_permissions(
        self, codes: Iterable[str], action: Action = Action.VIEW, fallback=None
    ):
        codes = list(codes)
        return self._wrap(
            lambda: self._sessions.has_all_permissions(codes, action), fallback
        )

    def _wrap(self, decide: Callable[[], Decision], fallback):
        def decorator(func):
            if inspect.iscoroutinefunction(func):

                @functools.wraps(func)
                async def async_wrapper(*args, **kwargs):
                    decision = decide()
                    if decision is Decision.ALLOWED:
                        return await func(*args, **kwargs)
                    if decision is Decision.PENDING:
                        return self.loading
                    result = _produce(fallback, *args, **kwargs)
                    if inspect.isawaitable(result):
                        result = await result
                    return result

                return async_wrapper

            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                decision = decide()
                if decision is Decision.ALLOWED:
                    return func(*args, **kwargs)
                if decision is Decision.PENDING:
                    return self.loading
                return _produce(fallback, *args, **kwargs)

            return wrapper

        return decorator
