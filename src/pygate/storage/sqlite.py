from contextlib import asynccontextmanager
from typing import Optional, Type, TypeVar, Union
import aiosqlite
from .sql import SQLSession
from .storage import Storage
from ..models import Model

T = TypeVar("T", bound=Model)


class SQLiteSession(SQLSession):
    def __init__(self, conn_uri: str):
        self.conn_uri = conn_uri
        self.connection: Optional[aiosqlite.Connection] = None

    def python_to_sqltype(self, py_type) -> str:
        # unions map to their first non-None member
        if isinstance(py_type, list):
            main_type = next((t for t in py_type if t != "NoneType"), "TEXT")
            return self.python_to_sqltype(main_type)

        mapping = {
            "str": "TEXT",
            "bool": "INTEGER",
            "int": "INTEGER",
            "float": "REAL",
            "datetime": "TEXT",
            "json": "TEXT",
            "NoneType": "TEXT",
            "auto_increment": "AUTOINCREMENT",
        }
        return mapping.get(py_type, "TEXT")

    async def execute(self, sql: str, *args, force_commit=False):
        async with self.connection.execute(sql, *args) as cursor:
            # transactions are committed by Storage.begin()
            if force_commit:
                await self.connection.commit()
            return cursor.lastrowid

    async def init_index(self, table: str, indexes: list[str]):
        for col in indexes:
            index_name = f"{table}_{col}_idx"
            await self.connection.execute(
                f"CREATE INDEX IF NOT EXISTS {index_name} ON {table}({col});"
            )
        await self.connection.commit()

    def _row_to_model(self, table: Type[T], row) -> T:
        # id is init=False: set it after construction
        schema = table.get_schema(exclude=["id"])
        obj = table(**self.decode(schema, dict(zip(schema, row[1:]))))
        obj.id = row[0]
        return obj

    @staticmethod
    def _matches(obj: Model, contains: Optional[dict]) -> bool:
        for key, contain_value in (contains or {}).items():
            value = getattr(obj, key, None)
            if value is None:
                if contain_value is None:
                    continue
                return False
            if isinstance(contain_value, (list, tuple, set)):
                if not set(value).intersection(contain_value):
                    return False
            elif contain_value not in value:
                return False
        return True

    async def get(
        self,
        model: Union[T, Type[T]],
        for_update=False,
        filters: dict = None,
        contains: dict = None,
    ) -> Optional[T]:
        # sqlite has no row level locks; for_update is accepted for interface parity
        if not filters:
            raise ValueError("Filters must be provided for sqlite adapter")
        try:
            table = Storage.get_model_class(model)
            where = " AND ".join(f"{attribute}=?" for attribute in filters)
            select = f"SELECT * FROM {self.table_name(table)} WHERE {where} LIMIT 1"
            async with self.connection.execute(select, list(filters.values())) as cursor:
                row = await cursor.fetchone()
            if not row:
                return None
            result = self._row_to_model(table, row)
            return result if self._matches(result, contains) else None
        except Exception as e:
            raise self.process_exception(e)

    async def list(
        self,
        model: Union[T, Type[T]],
        limit: int = 25,
        after_id: Optional[int] = None,
        filters: dict = None,
        contains: dict = None,
    ) -> list[T]:
        try:
            table = Storage.get_model_class(model)
            where_clauses = [f"{attribute}=?" for attribute in filters or {}]
            values = list((filters or {}).values())
            if after_id is not None:
                where_clauses.append("id > ?")
                values.append(after_id)
            where = f"WHERE {' AND '.join(where_clauses)}" if where_clauses else ""

            select = f"SELECT * FROM {self.table_name(table)} {where} ORDER BY id ASC LIMIT {int(limit)}"
            async with self.connection.execute(select, values) as cursor:
                rows = await cursor.fetchall()

            results = [self._row_to_model(table, row) for row in rows]
            return [obj for obj in results if self._matches(obj, contains)]
        except Exception as e:
            raise self.process_exception(e)

    async def update(self, model: Union[T, Type[T]], filters: dict, updates: dict):
        if not filters:
            raise ValueError("filters are empty")
        try:
            table = Storage.get_model_class(model)
            updates = self.encode(table.get_schema(exclude=["id"]), updates)
            if not updates:
                return None

            set_clause = ", ".join(f"{attr}=?" for attr in updates)
            where_clause = " AND ".join(f"{attr}=?" for attr in filters)
            sql = f"UPDATE {self.table_name(table)} SET {set_clause} WHERE {where_clause} RETURNING *"
            async with self.connection.execute(
                sql, (*updates.values(), *filters.values())
            ) as cursor:
                row = await cursor.fetchone()
            await self.connection.commit()
            if not row:
                return None
            return self._row_to_model(table, row)
        except Exception as e:
            raise self.process_exception(e)

    async def delete(self, model: Union[T, Type[T]], filters: dict) -> bool:
        if not filters:
            raise ValueError("filters are empty")
        try:
            table = Storage.get_model_class(model)
            where_clause = " AND ".join(f"{attr}=?" for attr in filters)
            sql = f"DELETE FROM {self.table_name(table)} WHERE {where_clause}"
            async with self.connection.execute(sql, tuple(filters.values())) as cursor:
                deleted = cursor.rowcount
            await self.connection.commit()
            return deleted > 0
        except Exception as e:
            raise self.process_exception(e)

    async def rollback(self):
        return await self.connection.rollback()

    async def begin(self):
        await self.connection.execute("BEGIN")

    async def commit(self):
        await self.connection.commit()

    async def connect(self):
        self.connection = await aiosqlite.connect(self.conn_uri)
        return self

    async def close(self):
        if self.connection is not None:
            await self.connection.close()
            self.connection = None

    def get_placeholder(self, count: int) -> str:
        return ",".join("?" for _ in range(count))

    def process_exception(self, e: Exception) -> Exception:
        if isinstance(e, aiosqlite.IntegrityError):
            msg = str(e)
            if "UNIQUE constraint failed" in msg:
                return DuplicateEntry(msg)
            elif "NOT NULL constraint failed" in msg:
                return StorageError(f"Missing required field: {msg}")
            return StorageError(f"Integrity error: {msg}")

        elif isinstance(e, aiosqlite.OperationalError):
            msg = str(e)
            if "no such table" in msg:
                return StorageError(f"Table not found: {msg}")
            elif "no such column" in msg:
                return StorageError(f"Invalid column: {msg}")
            return StorageError(f"Operational error: {msg}")

        return e


class StorageError(Exception):
    pass


class DuplicateEntry(StorageError):
    def __init__(self, msg: str = None, *args):
        message = f"Duplicate entry error: {msg}" if msg else "Duplicate entry error"
        super().__init__(message, *args)


class SQLite(Storage):
    def __init__(self, connection_uri: str):
        super().__init__(connection_uri)

    @asynccontextmanager
    async def session(self):
        session = SQLiteSession(self.conn_uri)
        try:
            await session.connect()
            yield session
        finally:
            await session.close()
