from abc import ABC
from dataclasses import dataclass, asdict, fields, MISSING, field
from typing import ClassVar, Optional, Union, get_origin, get_args
from types import UnionType
import datetime


class MissingDefault:
    pass


class CurrentTimeStamp:
    pass


def _type_names(field_type) -> list[str]:
    return [t.__name__ if hasattr(t, "__name__") else str(t) for t in get_args(field_type)]


@dataclass
class Model(ABC):
    """
    Base for records kept by a storage adapter. Fields describe their column
    through dataclass metadata (primary_key, index, unique, auto_increment).
    """

    # ClassVars are invisible to fields(); id is assigned by the storage
    exclude: ClassVar[list[str]] = ["id"]
    id: Optional[int] = field(
        default=None,
        metadata={"primary_key": True, "auto_increment": True},
        init=False,
    )

    def to_dict(self, exclude: Optional[list[str]] = None, include_none: bool = True) -> dict:
        exclude = exclude or []
        return {
            k: v
            for k, v in asdict(self).items()
            if k not in self.exclude
            and k not in exclude
            and (include_none or v is not None)
        }

    @classmethod
    def get_fields(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    def get_values(self) -> dict:
        """
        Values to insert. None is only written when the field type is Optional,
        otherwise the column default applies.
        """
        values = {}
        for f in fields(self):
            if f.name in self.exclude:
                continue
            value = getattr(self, f.name, None)
            if value is not None:
                values[f.name] = value
            elif get_origin(f.type) in (Union, UnionType) and "NoneType" in _type_names(
                f.type
            ):
                values[f.name] = None
        return values

    @classmethod
    def get_schema(cls, exclude: Optional[list[str]] = None) -> dict:
        """Column description per field; only default_factory defaults are carried over"""
        exclude = exclude or []
        schema = {}
        for f in fields(cls):
            if f.name in exclude:
                continue
            origin = get_origin(f.type)
            default = MissingDefault()
            if f.default_factory is not MISSING:
                if isinstance(f.type, type) and issubclass(f.type, datetime.datetime):
                    default = CurrentTimeStamp()
                else:
                    default = f.default_factory()

            if origin in (Union, UnionType):
                column_type = _type_names(f.type)
            elif origin in (list, dict, tuple):
                column_type = "json"
            else:
                column_type = [f.type.__name__ if hasattr(f.type, "__name__") else str(f.type)]

            schema[f.name] = {
                "type": column_type,
                "default": default,
                "primary_key": f.metadata.get("primary_key", False),
                "index": f.metadata.get("index", False),
                "unique": f.metadata.get("unique", False),
                "auto_increment": f.metadata.get("auto_increment", False),
            }
        return schema
