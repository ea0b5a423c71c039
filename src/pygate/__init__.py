from .models import (
    Action,
    ActionMatching,
    Actor,
    ActorSession,
    Decision,
    Role,
)
from .registry import (
    Registry,
    PermissionModule,
    PermissionEntry,
    ConfigurationError,
    UnknownPermission,
    default_registry,
)
from .permissions import Permissions, RBAC, InvalidPermissionAction
from .providers import IdentityProvider, MemoryIdentity, HTTPIdentity
from .roles import RoleStore, MemoryRoleStore, SQLRoleStore, RoleNotFound, ProtectedRole, InvalidRole
from .session import SessionManager, resolve
from .gate import (
    Gate,
    Rendered,
    Outcome,
    LOADING,
    RouteAdmission,
    AdmissionRequest,
    Continue,
    RedirectTo,
)
from .storage import SQLite
from .token import Token
from .config import Settings, configure_logging
from .pygate import Pygate

__all__ = [
    "Action",
    "ActionMatching",
    "Actor",
    "ActorSession",
    "Decision",
    "Role",
    "Registry",
    "PermissionModule",
    "PermissionEntry",
    "ConfigurationError",
    "UnknownPermission",
    "default_registry",
    "Permissions",
    "RBAC",
    "InvalidPermissionAction",
    "IdentityProvider",
    "MemoryIdentity",
    "HTTPIdentity",
    "RoleStore",
    "MemoryRoleStore",
    "SQLRoleStore",
    "RoleNotFound",
    "ProtectedRole",
    "InvalidRole",
    "SessionManager",
    "resolve",
    "Gate",
    "Rendered",
    "Outcome",
    "LOADING",
    "RouteAdmission",
    "AdmissionRequest",
    "Continue",
    "RedirectTo",
    "SQLite",
    "Token",
    "Settings",
    "configure_logging",
    "Pygate",
]
