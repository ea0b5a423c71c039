import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional
from ..models.action import Action


CODE_PATTERN = re.compile(r"^[a-z][a-z0-9_]*\.[a-z][a-z0-9_]*$")


class ConfigurationError(Exception):
    """Programmer or data error: never a user facing denial."""

    def __init__(self, msg: str = None, *args):
        message = f"Configuration error: {msg}" if msg else "Configuration error"
        super().__init__(message, *args)


class UnknownPermission(ConfigurationError):
    def __init__(self, code: str, *args):
        self.code = code
        super().__init__(f"unknown permission code {code!r}", *args)


@dataclass(frozen=True)
class PermissionEntry:
    code: str
    label: str
    # action the verb intrinsically implies, None for verbs like "manage"
    action: Optional[Action] = None

    @property
    def module(self) -> str:
        return self.code.split(".", 1)[0]

    @property
    def verb(self) -> str:
        return self.code.split(".", 1)[1]


@dataclass(frozen=True)
class PermissionModule:
    key: str
    label: str
    entries: tuple[PermissionEntry, ...] = field(default_factory=tuple)

    @property
    def codes(self) -> tuple[str, ...]:
        return tuple(entry.code for entry in self.entries)


class Registry:
    """
    Read-only catalog of every grantable permission code, grouped by module.
    It is built once and handed to the engine and the session resolver,
    so tests can run against their own fixture catalogs.
    """

    def __init__(self, modules: Iterable[PermissionModule]):
        self._modules: dict[str, PermissionModule] = {}
        self._by_code: dict[str, tuple[PermissionModule, PermissionEntry]] = {}

        for module in modules:
            if module.key in self._modules:
                raise ConfigurationError(f"duplicate permission module {module.key!r}")
            for entry in module.entries:
                if not CODE_PATTERN.match(entry.code):
                    raise ConfigurationError(
                        f"permission code {entry.code!r} is not <module>.<verb>"
                    )
                if entry.code in self._by_code:
                    raise ConfigurationError(
                        f"duplicate permission code {entry.code!r}"
                    )
                self._by_code[entry.code] = (module, entry)
            self._modules[module.key] = module

        self._codes = frozenset(self._by_code)

    @classmethod
    def from_dict(cls, catalog: dict) -> "Registry":
        """
        Build a registry from the plain shape the admin UI used:
        {"users": {"label": "Users", "permissions": [{"key": ..., "label": ..., "action": ...}]}}
        """
        modules = []
        for key, module in catalog.items():
            entries = tuple(
                PermissionEntry(
                    code=perm["key"],
                    label=perm["label"],
                    action=Action(perm["action"]) if perm.get("action") else None,
                )
                for perm in module.get("permissions", [])
            )
            modules.append(
                PermissionModule(key=key, label=module.get("label", key), entries=entries)
            )
        return cls(modules)

    @property
    def modules(self) -> tuple[PermissionModule, ...]:
        return tuple(self._modules.values())

    def lookup(self, code: str) -> PermissionModule:
        try:
            return self._by_code[code][0]
        except KeyError:
            raise UnknownPermission(code) from None

    def entry(self, code: str) -> PermissionEntry:
        try:
            return self._by_code[code][1]
        except KeyError:
            raise UnknownPermission(code) from None

    def all_codes(self) -> frozenset[str]:
        return self._codes

    def validate(self, codes: Iterable[str]) -> list[str]:
        checked = []
        for code in codes:
            if code not in self._codes:
                raise UnknownPermission(code)
            checked.append(code)
        return checked

    def search(self, query: str = "") -> "RegistrySearch":
        return RegistrySearch(self, query)

    def __contains__(self, code: object) -> bool:
        return code in self._codes

    def __len__(self) -> int:
        return len(self._codes)

    def __iter__(self) -> Iterator[PermissionModule]:
        return iter(self._modules.values())


class RegistrySearch:
    """Lazy (module, entry) matches; every iteration rescans from the start."""

    def __init__(self, registry: Registry, query: str):
        self._registry = registry
        self._needle = (query or "").lower()

    def __iter__(self) -> Iterator[tuple[PermissionModule, PermissionEntry]]:
        for module in self._registry.modules:
            for entry in module.entries:
                if (
                    self._needle in entry.label.lower()
                    or self._needle in entry.code.lower()
                ):
                    yield module, entry
