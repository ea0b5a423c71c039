from abc import ABC, abstractmethod
from contextlib import asynccontextmanager, AbstractAsyncContextManager
from typing import AsyncGenerator, Any, List, Optional, Type, TypeVar, Union
from ..models import Model

T = TypeVar("T", bound=Model)


class StorageSession(ABC):
    @abstractmethod
    async def create(self, model: T) -> T: ...
    @abstractmethod
    async def update(
        self, model: Union[T, Type[T]], filters: dict, updates: dict
    ) -> Optional[T]: ...
    @abstractmethod
    async def delete(self, model: Union[T, Type[T]], filters: dict) -> bool: ...
    @abstractmethod
    async def get(
        self,
        model: Union[T, Type[T]],
        for_update: bool = False,
        filters: Optional[dict] = None,
        contains: Optional[dict] = None,
    ) -> Optional[T]: ...
    @abstractmethod
    async def list(
        self,
        model: Union[T, Type[T]],
        limit: int = 25,
        after_id: Optional[int] = None,
        filters: Optional[dict] = None,
        contains: Optional[dict] = None,
    ) -> list[T]: ...

    @abstractmethod
    async def begin(self): ...
    @abstractmethod
    async def commit(self): ...
    @abstractmethod
    async def rollback(self): ...
    @abstractmethod
    async def connect(self) -> "StorageSession": ...
    @abstractmethod
    async def close(self): ...
    @abstractmethod
    async def init_schema(self, schema: Type[Model]): ...
    @abstractmethod
    async def init_index(self, table: str, indexes: List[str]): ...


# each session() call opens its own connection: `async with storage.session()`
class Storage(ABC):
    def __init__(self, conn_uri: str):
        self.conn_uri = conn_uri

    @abstractmethod
    def session(self) -> AbstractAsyncContextManager[StorageSession]:
        pass

    @asynccontextmanager
    async def begin(self) -> AsyncGenerator[StorageSession, Any]:
        async with self.session() as session:
            await session.begin()
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    @staticmethod
    def get_model_class(model: object) -> Type[Model]:
        if isinstance(model, Model):
            return model.__class__
        elif isinstance(model, type) and issubclass(model, Model):
            return model

        raise TypeError("Invalid model type")
