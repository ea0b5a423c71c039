from .registry import (
    Registry,
    RegistrySearch,
    PermissionModule,
    PermissionEntry,
    ConfigurationError,
    UnknownPermission,
)
from .catalog import CATALOG, default_registry

__all__ = [
    "Registry",
    "RegistrySearch",
    "PermissionModule",
    "PermissionEntry",
    "ConfigurationError",
    "UnknownPermission",
    "CATALOG",
    "default_registry",
]
