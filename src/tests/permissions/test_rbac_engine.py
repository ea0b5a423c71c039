import pytest
from pygate.models import Action, ActionMatching, ActorSession, Decision
from pygate.permissions import RBAC, InvalidPermissionAction
from pygate.registry import UnknownPermission


def loaded(*codes):
    return ActorSession(actor_uid="u1", permissions=frozenset(codes))


def test_single_code_allowed(rbac):
    session = loaded("user.view", "role.view")
    assert rbac.check_one(session, "user.view") is Decision.ALLOWED
    assert rbac.check_one(session, "user.view")


def test_single_code_denied(rbac):
    session = loaded("user.view", "role.view")
    decision = rbac.check_one(session, "user.delete")
    assert decision is Decision.DENIED
    assert not decision


def test_any_and_all(rbac):
    session = loaded("user.view")
    codes = ["user.view", "user.delete"]
    assert rbac.check_any(session, codes) is Decision.ALLOWED
    assert rbac.check_all(session, codes) is Decision.DENIED


def test_all_satisfied(rbac):
    session = loaded("user.view", "user.delete")
    assert rbac.check_all(session, ["user.view", "user.delete"]) is Decision.ALLOWED


def test_empty_requirements(rbac):
    session = loaded("user.view")
    assert rbac.check_any(session, []) is Decision.DENIED
    assert rbac.check_all(session, []) is Decision.ALLOWED


@pytest.mark.parametrize(
    "check, argument",
    [
        ("check_one", "user.view"),
        ("check_any", ["user.view"]),
        ("check_all", ["user.view"]),
        ("check_any", []),
        ("check_all", []),
        # codes aren't looked at before the session has loaded
        ("check_one", "nothing.here"),
        ("check_all", ["nothing.here"]),
    ],
)
def test_pending_while_loading(rbac, check, argument):
    session = ActorSession.pending("u1")
    decision = getattr(rbac, check)(session, argument)
    assert decision is Decision.PENDING
    assert decision.is_pending
    assert not decision


def test_unknown_code_is_configuration_error(rbac):
    session = loaded("user.view")
    with pytest.raises(UnknownPermission):
        rbac.check_one(session, "user.fly")


def test_unknown_code_after_a_match_still_raises(rbac):
    session = loaded("user.view")
    with pytest.raises(UnknownPermission):
        rbac.check_any(session, ["user.view", "user.fly"])
    with pytest.raises(UnknownPermission):
        rbac.check_all(session, ["user.delete", "user.fly"])


def test_inactive_session_without_permissions_is_denied(rbac):
    session = ActorSession(actor_uid="u1", is_active=False)
    assert rbac.check_one(session, "user.view") is Decision.DENIED
    assert rbac.check_any(session, ["user.view", "role.view"]) is Decision.DENIED


def test_checks_are_idempotent(rbac):
    session = loaded("user.view")
    results = {rbac.check_any(session, ["user.view", "role.view"]) for _ in range(5)}
    assert results == {Decision.ALLOWED}


def test_action_ignored_by_default(rbac):
    session = loaded("user.view")
    assert rbac.action_matching is ActionMatching.IGNORE
    for action in Action:
        assert rbac.check_one(session, "user.view", action) is Decision.ALLOWED


def test_strict_action_matching(registry):
    rbac = RBAC(registry, action_matching=ActionMatching.STRICT)
    session = loaded("user.view", "role.update", "permission.manage")

    assert rbac.check_one(session, "user.view", Action.VIEW) is Decision.ALLOWED
    assert rbac.check_one(session, "user.view", Action.DELETE) is Decision.DENIED
    assert rbac.check_one(session, "role.update", Action.EDIT) is Decision.ALLOWED
    assert rbac.check_one(session, "role.update", Action.VIEW) is Decision.DENIED
    # no implied action: any action passes
    assert rbac.check_one(session, "permission.manage", Action.APPROVE) is Decision.ALLOWED


def test_action_accepts_plain_strings(rbac):
    session = loaded("user.view")
    assert rbac.check_one(session, "user.view", "edit") is Decision.ALLOWED


def test_invalid_action(rbac):
    session = loaded("user.view")
    with pytest.raises(InvalidPermissionAction):
        rbac.check_one(session, "user.view", "fly")
