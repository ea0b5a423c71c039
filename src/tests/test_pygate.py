import logging
import pytest
from pydantic import ValidationError
from pygate import (
    Action,
    ActionMatching,
    Actor,
    Continue,
    Decision,
    MemoryIdentity,
    MemoryRoleStore,
    Outcome,
    Pygate,
    RedirectTo,
    Role,
    Settings,
    default_registry,
)
from pygate.providers import HTTPIdentity


@pytest.fixture()
def fleet_roles():
    registry = default_registry()
    return MemoryRoleStore(
        registry,
        [
            Role(
                uid="store_keeper",
                name="Store keeper",
                permissions=["inventory.view", "grn.view", "grn.export", "po.view"],
            ),
            Role(
                uid="administrator",
                name="Administrator",
                permissions=sorted(registry.all_codes()),
                system=True,
            ),
        ],
    )


@pytest.fixture()
def app(fleet_roles):
    identity = MemoryIdentity(
        Actor(uid="7", name="Sam", role_uids=("store_keeper",)), token="tok"
    )
    return Pygate(identity, fleet_roles, settings=Settings(_env_file=None))


@pytest.mark.asyncio
async def test_lifecycle(app):
    assert app.is_loading()
    assert app.gate.guard("grn.view", "grns").outcome is Outcome.LOADING

    session = await app.start()
    assert app.session is session
    assert app.has_permission("grn.export") is Decision.ALLOWED
    assert app.has_any_permission(["user.view", "po.view"]) is Decision.ALLOWED
    assert app.has_all_permissions(["user.view", "po.view"]) is Decision.DENIED
    assert app.gate.guard("settings.edit", "x", action=Action.EDIT).message == (
        "You don't have permission to access this resource. "
        "Required: settings.edit.edit"
    )

    app.identity.reassign("administrator")
    await app.sessions.wait()
    assert app.has_permission("settings.edit") is Decision.ALLOWED

    app.logout()
    assert app.session is None
    assert app.has_permission("grn.view") is Decision.DENIED
    app.stop()


def test_admit_path(app):
    assert app.admit_path("/", {}) == RedirectTo("/login")
    assert app.admit_path("/inventory", {}) == RedirectTo("/login")
    assert app.admit_path("/inventory", {"auth_token": "tok"}) == Continue()
    assert app.admit_path("/login", {"auth_token": "tok"}) == RedirectTo("/inventory")


def test_settings_from_environment(monkeypatch, fleet_roles):
    monkeypatch.setenv("PYGATE_LOGIN_PATH", "/signin")
    monkeypatch.setenv("PYGATE_TOKEN_COOKIE", "session")
    monkeypatch.setenv("PYGATE_ACTION_MATCHING", "strict")
    monkeypatch.setenv("PYGATE_PROTECTED_PATHS", '["/admin"]')
    monkeypatch.setenv("PYGATE_LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)
    assert settings.login_path == "/signin"
    assert settings.action_matching is ActionMatching.STRICT
    assert settings.protected_paths == ["/admin"]
    assert settings.log_level == "DEBUG"

    app = Pygate(MemoryIdentity(), fleet_roles, settings=settings)
    assert app.permissions.action_matching is ActionMatching.STRICT
    assert logging.getLogger("pygate").level == logging.DEBUG
    assert app.admit_path("/admin/users", {"session": "tok"}) == Continue()
    assert app.admit_path("/admin/users", {"auth_token": "tok"}) == RedirectTo("/signin")


def test_settings_reject_relative_paths():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, login_path="login")
    with pytest.raises(ValidationError):
        Settings(_env_file=None, protected_paths=["admin"])


def test_token_secret_enables_signature_checks(fleet_roles):
    settings = Settings(_env_file=None, token_secret="facade-secret-0123456789abcdefgh")
    app = Pygate(MemoryIdentity(), fleet_roles, settings=settings)
    assert app.admit_path("/vehicles", {"auth_token": "not-a-jwt"}) == RedirectTo("/login")


def test_over_http(fleet_roles):
    with pytest.raises(ValueError):
        Pygate.over_http(fleet_roles, settings=Settings(_env_file=None))

    settings = Settings(_env_file=None, api_url="http://api.local")
    app = Pygate.over_http(fleet_roles, token="tok", settings=settings)
    assert isinstance(app.identity, HTTPIdentity)
    assert app.identity.current_session_token() == "tok"
