import json
from abc import abstractmethod
from datetime import datetime
from typing import Optional, Type
from .storage import StorageSession
from ..models import Model, MissingDefault, CurrentTimeStamp


class SQLSession(StorageSession):
    """Shared SQL generation; dialects supply types, placeholders and execution."""

    @staticmethod
    def table_name(model: Type[Model]) -> str:
        return model.__name__.lower()

    async def init_schema(self, model: Type[Model]) -> str:
        table_name = self.table_name(model)
        columns_sql = []
        indexes = []

        for column, info in model.get_schema().items():
            col_type = info["type"]
            default = info["default"]

            if info["index"]:
                indexes.append(column)

            constraints = []
            if info["primary_key"]:
                constraints.append("PRIMARY KEY")
            if info["auto_increment"]:
                constraints.append(self.python_to_sqltype("auto_increment"))
            if info["unique"]:
                constraints.append("UNIQUE")

            not_null = ""
            if isinstance(col_type, list) and "NoneType" not in col_type:
                not_null = "NOT NULL"

            default_sql = ""
            if isinstance(default, CurrentTimeStamp):
                default_sql = f"DEFAULT {self.get_default_datetime_sql()}"
            elif not isinstance(default, MissingDefault):
                if col_type == "json":
                    default_sql = f"DEFAULT {self.get_default_json_sql()}"
                elif isinstance(default, str):
                    default_sql = f"DEFAULT '{default}'"
                elif default is None:
                    default_sql = "DEFAULT NULL"
                else:
                    default_sql = f"DEFAULT {default}"

            col_def = " ".join(
                part
                for part in [
                    column,
                    self.python_to_sqltype(col_type),
                    " ".join(constraints),
                    not_null,
                    default_sql,
                ]
                if part
            )
            columns_sql.append(col_def)

        create_table_sql = (
            f"CREATE TABLE IF NOT EXISTS {table_name} (\n  "
            + ",\n  ".join(columns_sql)
            + "\n);"
        )
        await self.execute(create_table_sql)
        await self.init_index(table_name, indexes)
        return create_table_sql

    async def create(self, model: Model) -> Model:
        try:
            table_name = self.table_name(type(model))
            model_values = self.encode(model.get_schema(), model.get_values())
            columns = ",".join(model_values.keys())
            placeholders = self.get_placeholder(len(model_values))
            sql = f"INSERT INTO {table_name} ({columns}) VALUES ({placeholders})"
            model.id = await self.execute(sql, list(model_values.values()))
            return model
        except Exception as e:
            raise self.process_exception(e)

    @abstractmethod
    def python_to_sqltype(self, py_type) -> str:
        pass

    @abstractmethod
    async def execute(self, sql: str, *args):
        pass

    @abstractmethod
    def get_placeholder(self, count: int) -> str:
        pass

    @abstractmethod
    def process_exception(self, e: Exception) -> Exception:
        pass

    def get_default_datetime_sql(self):
        return "CURRENT_TIMESTAMP"

    def get_default_json_sql(self):
        return "NULL"

    def get_datetime_format(self):
        return "%Y-%m-%d %H:%M:%S.%f"

    def format_datetime_for_db(self, dt: Optional[datetime]) -> Optional[str]:
        if dt is None:
            return None
        return dt.strftime(self.get_datetime_format())

    def parse_datetime_from_db(self, dt_str: Optional[str]) -> Optional[datetime]:
        if dt_str is None:
            return None
        for fmt in (
            self.get_datetime_format(),
            "%Y-%m-%d %H:%M:%S",
            "%Y-%m-%dT%H:%M:%S",
        ):
            try:
                return datetime.strptime(dt_str, fmt)
            except ValueError:
                continue
        # CURRENT_TIMESTAMP defaults and ISO strings with offsets
        return datetime.fromisoformat(dt_str.replace("Z", "+00:00"))

    def encode(self, schema: dict, values: dict) -> dict:
        encoded = {}
        for key, value in values.items():
            if key not in schema:
                continue
            key_type = schema[key]["type"]
            if "json" in key_type and value is not None:
                encoded[key] = json.dumps(value)
            elif "datetime" in key_type and isinstance(value, datetime):
                encoded[key] = self.format_datetime_for_db(value)
            else:
                encoded[key] = value
        return encoded

    def decode(self, schema: dict, values: dict) -> dict:
        decoded = {}
        for key, value in values.items():
            if key not in schema:
                continue
            key_type = schema[key]["type"]
            if "json" in key_type and value is not None:
                decoded[key] = json.loads(value)
            elif "bool" in key_type:
                decoded[key] = bool(value)
            elif "datetime" in key_type and value is not None:
                decoded[key] = self.parse_datetime_from_db(value)
            else:
                decoded[key] = value
        return decoded
