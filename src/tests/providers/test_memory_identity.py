import pytest
from pygate.models import Actor
from pygate.providers import MemoryIdentity


@pytest.mark.asyncio
async def test_login_logout_notify():
    identity = MemoryIdentity()
    events = []
    unsubscribe = identity.subscribe(lambda: events.append("changed"))

    assert await identity.current_actor() is None

    identity.login(Actor(uid="u1", role_uids=("viewer",)), "tok")
    assert (await identity.current_actor()).uid == "u1"
    assert identity.current_session_token() == "tok"

    identity.logout()
    assert await identity.current_actor() is None
    assert identity.current_session_token() is None

    unsubscribe()
    identity.login(Actor(uid="u2"), "tok2")
    assert events == ["changed", "changed"]


@pytest.mark.asyncio
async def test_reassign_keeps_the_actor(identity):
    identity.reassign("admin", "viewer")
    actor = await identity.current_actor()
    assert actor.uid == "u1"
    assert actor.name == "Dana"
    assert actor.role_uids == ("admin", "viewer")


def test_reassign_requires_an_actor():
    with pytest.raises(ValueError):
        MemoryIdentity().reassign("admin")
