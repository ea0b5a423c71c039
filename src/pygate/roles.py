import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional
from .events import Observable
from .models import Role
from .registry import Registry, ConfigurationError
from .storage import Storage, DuplicateEntry

logger = logging.getLogger(__name__)


class RoleNotFound(ConfigurationError):
    def __init__(self, uid: str, *args):
        self.uid = uid
        super().__init__(f"role {uid!r} does not exist", *args)


class InvalidRole(ValueError):
    def __init__(self, msg: str = None, *args):
        message = f"Invalid role: {msg}" if msg else "Invalid role"
        super().__init__(message, *args)


class ProtectedRole(InvalidRole):
    def __init__(self, uid: str, *args):
        self.uid = uid
        super().__init__(f"system role {uid!r} cannot be deleted or renamed", *args)


class RoleStore(Observable, ABC):
    """
    Role storage collaborator. Sessions only ever call get_role (or the store
    itself, which is the same); the rest is the administrative workflow behind
    the roles pages. Subscribers receive the uid of every changed role.
    """

    def __init__(self, registry: Registry):
        super().__init__()
        self._registry = registry

    async def __call__(self, uid: str) -> Optional[Role]:
        return await self.get_role(uid)

    @abstractmethod
    async def get_role(self, uid: str) -> Optional[Role]:
        pass

    @abstractmethod
    async def list_roles(self) -> list[Role]:
        pass

    @abstractmethod
    async def _insert(self, role: Role) -> Role:
        pass

    @abstractmethod
    async def _replace(self, role: Role) -> Role:
        pass

    @abstractmethod
    async def _remove(self, uid: str) -> None:
        pass

    def parse(self, role: Role) -> Role:
        if not role.uid:
            raise InvalidRole("uid is required")
        if not role.name or not role.name.strip():
            raise InvalidRole("name is required")
        permissions = self._registry.validate(role.permissions)
        # grant order is kept, repeats are not
        role.permissions = list(dict.fromkeys(permissions))
        return role

    async def create(self, role: Role) -> Role:
        role = self.parse(role)
        if await self.get_role(role.uid) is not None:
            raise InvalidRole(f"role {role.uid!r} already exists")
        created = await self._insert(role)
        logger.info("role %s created with %d permissions", role.uid, len(role.permissions))
        self.notify(role.uid)
        return created

    async def update(self, role: Role) -> Role:
        existing = await self.get_role(role.uid)
        if existing is None:
            raise RoleNotFound(role.uid)
        role = self.parse(role)
        if existing.system and role.name != existing.name:
            raise ProtectedRole(role.uid)

        updated = replace(
            existing,
            name=role.name,
            description=role.description,
            permissions=role.permissions,
            updated_at=datetime.now(),
        )
        updated.id = existing.id
        updated = await self._replace(updated)
        logger.info("role %s updated", role.uid)
        self.notify(role.uid)
        return updated

    async def grant(self, uid: str, codes: Iterable[str]) -> Role:
        role = await self._require(uid)
        return await self.update(replace(role, permissions=[*role.permissions, *codes]))

    async def revoke(self, uid: str, codes: Iterable[str]) -> Role:
        role = await self._require(uid)
        codes = set(self._registry.validate(codes))
        return await self.update(
            replace(role, permissions=[p for p in role.permissions if p not in codes])
        )

    async def delete(self, uid: str) -> None:
        role = await self._require(uid)
        if role.system:
            raise ProtectedRole(uid)
        await self._remove(uid)
        logger.info("role %s deleted", uid)
        self.notify(uid)

    async def _require(self, uid: str) -> Role:
        role = await self.get_role(uid)
        if role is None:
            raise RoleNotFound(uid)
        return role


class MemoryRoleStore(RoleStore):
    def __init__(self, registry: Registry, roles: Iterable[Role] = ()):
        super().__init__(registry)
        self._roles: dict[str, Role] = {}
        for role in roles:
            role = self.parse(role)
            self._roles[role.uid] = role

    async def get_role(self, uid: str) -> Optional[Role]:
        return self._roles.get(uid)

    async def list_roles(self) -> list[Role]:
        return list(self._roles.values())

    async def _insert(self, role: Role) -> Role:
        self._roles[role.uid] = role
        return role

    async def _replace(self, role: Role) -> Role:
        self._roles[role.uid] = role
        return role

    async def _remove(self, uid: str) -> None:
        del self._roles[uid]


class SQLRoleStore(RoleStore):
    """Roles persisted through any Storage adapter, one connection per call."""

    def __init__(self, registry: Registry, storage: Storage):
        super().__init__(registry)
        self._storage = storage

    async def init_schema(self):
        async with self._storage.session() as session:
            await session.init_schema(Role)

    async def get_role(self, uid: str) -> Optional[Role]:
        async with self._storage.session() as session:
            return await session.get(Role, filters={"uid": uid})

    async def list_roles(self, limit: int = 100) -> list[Role]:
        roles: list[Role] = []
        after_id = None
        async with self._storage.session() as session:
            while True:
                page = await session.list(Role, limit=limit, after_id=after_id)
                roles.extend(page)
                if len(page) < limit:
                    return roles
                after_id = page[-1].id

    async def roles_with(self, code: str) -> list[Role]:
        """Roles granting a code, as the permission detail page lists them"""
        self._registry.entry(code)
        async with self._storage.session() as session:
            return await session.list(Role, limit=1000, contains={"permissions": code})

    async def _insert(self, role: Role) -> Role:
        try:
            async with self._storage.begin() as session:
                return await session.create(role)
        except DuplicateEntry:
            raise InvalidRole(f"role {role.uid!r} already exists") from None

    async def _replace(self, role: Role) -> Role:
        async with self._storage.begin() as session:
            return await session.update(
                Role,
                filters={"uid": role.uid},
                updates=role.to_dict(exclude=["uid", "created_at"]),
            )

    async def _remove(self, uid: str) -> None:
        async with self._storage.begin() as session:
            await session.delete(Role, filters={"uid": uid})
