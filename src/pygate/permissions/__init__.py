from .permissions import Permissions, InvalidPermissionAction
from .RBAC import RBAC

__all__ = ["Permissions", "InvalidPermissionAction", "RBAC"]
