from abc import ABC, abstractmethod
from typing import Optional
from ..events import Observable
from ..models import Actor


class InvalidIdentityResponse(Exception):
    def __init__(self, msg: str = None, *args):
        message = (
            f"Invalid identity response: {msg}" if msg else "Invalid identity response"
        )
        super().__init__(message, *args)


class IdentityProvider(Observable, ABC):
    """
    Authentication collaborator. It knows who is signed in and which token
    carries that sign-in; pygate only reads from it. Subscribers are notified
    with no arguments whenever the token or the actor's roles change.
    """

    @abstractmethod
    async def current_actor(self) -> Optional[Actor]:
        """Return the signed in actor, or None when unauthenticated"""
        pass

    @abstractmethod
    def current_session_token(self) -> Optional[str]:
        pass
