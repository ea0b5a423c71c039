from typing import Optional
from .provider import IdentityProvider
from ..models import Actor


class MemoryIdentity(IdentityProvider):
    """Identity held in process, for tests and for apps that sign in themselves."""

    def __init__(self, actor: Optional[Actor] = None, token: Optional[str] = None):
        super().__init__()
        self._actor = actor
        self._token = token

    async def current_actor(self) -> Optional[Actor]:
        return self._actor

    def current_session_token(self) -> Optional[str]:
        return self._token

    def login(self, actor: Actor, token: str) -> None:
        self._actor = actor
        self._token = token
        self.notify()

    def logout(self) -> None:
        self._actor = None
        self._token = None
        self.notify()

    def reassign(self, *role_uids: str) -> None:
        """Swap the signed in actor's roles, as the admin user page does"""
        if self._actor is None:
            raise ValueError("No actor is signed in")
        self._actor = Actor(
            uid=self._actor.uid,
            name=self._actor.name,
            role_uids=role_uids,
            is_active=self._actor.is_active,
            metadata=self._actor.metadata,
        )
        self.notify()
