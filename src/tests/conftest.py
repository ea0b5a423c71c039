import pytest
import pytest_asyncio

from pygate.models import Actor, Role
from pygate.permissions import RBAC
from pygate.providers import MemoryIdentity
from pygate.registry import Registry
from pygate.roles import MemoryRoleStore, SQLRoleStore
from pygate.session import SessionManager
from pygate.storage import SQLite

FIXTURE_CATALOG = {
    "users": {
        "label": "Users",
        "permissions": [
            {"key": "user.view", "label": "View users", "action": "view"},
            {"key": "user.create", "label": "Create users", "action": "create"},
            {"key": "user.delete", "label": "Delete users", "action": "delete"},
        ],
    },
    "roles": {
        "label": "Roles",
        "permissions": [
            {"key": "role.view", "label": "View roles", "action": "view"},
            {"key": "role.update", "label": "Update roles", "action": "edit"},
        ],
    },
    "permissions": {
        "label": "Permissions",
        "permissions": [
            {"key": "permission.manage", "label": "Manage permissions"},
        ],
    },
}

@pytest.fixture()
def registry():
    return Registry.from_dict(FIXTURE_CATALOG)


@pytest.fixture()
def rbac(registry):
    return RBAC(registry)


@pytest.fixture()
def viewer_role():
    return Role(uid="viewer", name="Viewer", permissions=["user.view"])


@pytest.fixture()
def admin_role():
    return Role(
        uid="admin",
        name="Admin",
        permissions=["user.view", "user.delete"],
        system=True,
    )


@pytest.fixture()
def role_store(registry, viewer_role, admin_role):
    return MemoryRoleStore(registry, [viewer_role, admin_role])


@pytest.fixture()
def identity():
    return MemoryIdentity(
        Actor(uid="u1", name="Dana", role_uids=("viewer",)), token="token-1"
    )


@pytest.fixture()
def sessions(rbac, identity, role_store):
    return SessionManager(rbac, identity, role_store)


@pytest.fixture()
def sqlite_db_path(tmp_path):
    return str(tmp_path / "test.db")


@pytest.fixture()
def sqlite_storage(sqlite_db_path):
    return SQLite(sqlite_db_path)


@pytest_asyncio.fixture()
async def sql_role_store(registry, sqlite_storage):
    store = SQLRoleStore(registry, sqlite_storage)
    await store.init_schema()
    return store
