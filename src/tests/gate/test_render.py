import pytest
from pygate.gate import Gate, LOADING, Outcome
from pygate.models import Action, Decision


@pytest.fixture()
def gate(sessions):
    return Gate(sessions)


def test_pending_shows_loading(gate):
    rendered = gate.guard("user.view", "users table")
    assert rendered.outcome is Outcome.LOADING
    assert rendered.decision is Decision.PENDING
    assert rendered.content is LOADING
    assert not LOADING


def test_custom_loading_placeholder(sessions):
    gate = Gate(sessions, loading="spinner")
    assert gate.guard_all(["user.view"], "x").content == "spinner"


@pytest.mark.asyncio
async def test_allowed_shows_content(gate, sessions):
    await sessions.refresh()
    rendered = gate.guard("user.view", lambda: "users table")
    assert rendered.outcome is Outcome.CONTENT
    assert rendered.content == "users table"
    assert rendered.message is None


@pytest.mark.asyncio
async def test_denied_prefers_fallback(gate, sessions):
    await sessions.refresh()
    calls = []

    def content():
        calls.append("content")
        return "delete button"

    rendered = gate.guard("user.delete", content, action=Action.DELETE, fallback="read only")
    assert rendered.outcome is Outcome.FALLBACK
    assert rendered.content == "read only"
    assert calls == []


@pytest.mark.asyncio
async def test_denied_message(gate, sessions):
    await sessions.refresh()
    rendered = gate.guard("user.delete", "x", action="delete")
    assert rendered.outcome is Outcome.DENIED_MESSAGE
    assert rendered.decision is Decision.DENIED
    assert rendered.message == (
        "You don't have permission to access this resource. Required: user.delete.delete"
    )


@pytest.mark.asyncio
async def test_denied_without_message(gate, sessions):
    await sessions.refresh()
    rendered = gate.guard("user.delete", "x", show_message=False)
    assert rendered.outcome is Outcome.NOTHING
    assert rendered.content is None
    assert rendered.message is None


@pytest.mark.asyncio
async def test_guard_any_and_all(gate, sessions):
    await sessions.refresh()
    codes = ["user.view", "user.delete"]

    assert gate.guard_any(codes, "list").outcome is Outcome.CONTENT

    rendered = gate.guard_all(codes, "list", action=Action.EDIT)
    assert rendered.outcome is Outcome.DENIED_MESSAGE
    assert rendered.message == (
        "You don't have all required permissions. "
        "Required all of: user.view, user.delete.edit"
    )

    rendered = gate.guard_any(["role.view", "user.delete"], "list")
    assert rendered.message == (
        "You don't have permission to access this resource. "
        "Required any of: role.view, user.delete.view"
    )


@pytest.mark.asyncio
async def test_empty_requirements(gate, sessions):
    await sessions.refresh()
    assert gate.guard_all([], "open").outcome is Outcome.CONTENT
    assert gate.guard_any([], "closed", show_message=False).outcome is Outcome.NOTHING


@pytest.mark.asyncio
async def test_signed_out_is_denied(gate, sessions):
    sessions.end()
    assert gate.guard("user.view", "x").outcome is Outcome.DENIED_MESSAGE


@pytest.mark.asyncio
async def test_with_permission_wraps_sync_function(gate, sessions):
    @gate.with_permission("user.view")
    def users_page(page=1):
        """List users"""
        return f"users page {page}"

    @gate.with_permission("user.delete", fallback=lambda page=1: f"denied {page}")
    def delete_page(page=1):
        return "deleted"

    assert users_page.__name__ == "users_page"
    assert users_page.__doc__ == "List users"
    assert users_page() is LOADING

    await sessions.refresh()
    assert users_page(page=2) == "users page 2"
    assert delete_page(3) == "denied 3"


@pytest.mark.asyncio
async def test_with_permission_without_fallback_returns_none(gate, sessions):
    await sessions.refresh()

    @gate.with_all_permissions(["user.view", "user.delete"])
    def bulk_delete():
        return "done"

    assert bulk_delete() is None


@pytest.mark.asyncio
async def test_with_any_permission_wraps_coroutines(gate, sessions):
    @gate.with_any_permission(["user.view", "role.view"])
    async def listing():
        return "listing"

    async def denied():
        return "denied"

    @gate.with_permission("role.update", action=Action.EDIT, fallback=denied)
    async def edit_role():
        return "edited"

    assert await listing() is LOADING

    await sessions.refresh()
    assert await listing() == "listing"
    assert await edit_role() == "denied"


@pytest.mark.asyncio
async def test_wrapper_reads_the_latest_session(gate, sessions, identity):
    @gate.with_permission("user.delete", fallback="no")
    def delete_user():
        return "yes"

    await sessions.refresh()
    assert delete_user() == "no"

    identity.reassign("admin")
    await sessions.refresh()
    assert delete_user() == "yes"
