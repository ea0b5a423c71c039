"""
Tests for the HTTP identity backed by the token validation endpoint
"""

import pytest
from unittest.mock import AsyncMock, patch
from pygate.providers import HTTPIdentity, InvalidIdentityResponse


class TestHTTPIdentity:
    def setup_method(self):
        self.identity = HTTPIdentity("http://api.local/", token="tok")

    @pytest.mark.asyncio
    async def test_valid_token_yields_actor(self):
        response = {
            "success": True,
            "valid": True,
            "user": {
                "id": 12,
                "full_name": "Dana Smith",
                "role_id": "fleet_manager",
                "email": "dana@example.com",
            },
        }
        with patch.object(
            self.identity, "_make_request", AsyncMock(return_value=response)
        ) as request:
            actor = await self.identity.current_actor()

        request.assert_awaited_once_with(
            "http://api.local/api/auth/validate-token",
            headers={"Authorization": "Bearer tok"},
        )
        assert actor.uid == "12"
        assert actor.name == "Dana Smith"
        assert actor.role_uids == ("fleet_manager",)
        assert actor.metadata["email"] == "dana@example.com"

    @pytest.mark.asyncio
    async def test_rejected_token_yields_nobody(self):
        with patch.object(
            self.identity,
            "_make_request",
            AsyncMock(return_value={"success": False, "valid": False}),
        ):
            assert await self.identity.current_actor() is None

    @pytest.mark.asyncio
    async def test_no_token_skips_the_request(self):
        identity = HTTPIdentity("http://api.local")
        with patch.object(identity, "_make_request", AsyncMock()) as request:
            assert await identity.current_actor() is None
        request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_user_without_id(self):
        response = {"success": True, "valid": True, "user": {"name": "ghost"}}
        with patch.object(
            self.identity, "_make_request", AsyncMock(return_value=response)
        ):
            with pytest.raises(InvalidIdentityResponse):
                await self.identity.current_actor()

    def test_set_token_notifies_on_change(self):
        events = []
        self.identity.subscribe(lambda: events.append(self.identity.current_session_token()))

        self.identity.set_token("tok")
        self.identity.set_token("other")
        self.identity.set_token(None)

        assert events == ["other", None]

    def test_custom_validation_path(self):
        identity = HTTPIdentity("http://api.local", validate_token_path="/auth/me")
        assert identity.validate_token_path == "/auth/me"
        assert identity.api_url == "http://api.local"
