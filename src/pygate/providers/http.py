import logging
from typing import Any, Dict, Optional
import aiohttp
from .provider import IdentityProvider, InvalidIdentityResponse
from ..models import Actor

logger = logging.getLogger(__name__)


class HTTPIdentity(IdentityProvider):
    """
    Identity backed by the inventory API's token validation endpoint.

    The endpoint answers {"success": true, "valid": true, "user": {...}} for a
    live token; anything else means the caller is not signed in.
    """

    VALIDATE_TOKEN_PATH = "/api/auth/validate-token"

    def __init__(
        self,
        api_url: str,
        token: Optional[str] = None,
        validate_token_path: str = VALIDATE_TOKEN_PATH,
    ):
        super().__init__()
        self.api_url = api_url.rstrip("/")
        self.validate_token_path = validate_token_path
        self._token = token

    def current_session_token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        if token == self._token:
            return
        self._token = token
        self.notify()

    async def current_actor(self) -> Optional[Actor]:
        if not self._token:
            return None

        data = await self._make_request(
            f"{self.api_url}{self.validate_token_path}",
            headers={"Authorization": f"Bearer {self._token}"},
        )
        if not data.get("success") or not data.get("valid"):
            logger.info("token rejected by %s", self.api_url)
            return None

        user = data.get("user")
        if not isinstance(user, dict) or user.get("id", user.get("uid")) is None:
            raise InvalidIdentityResponse("user record with an id is required")
        return Actor.from_dict(user)

    async def _make_request(
        self, url: str, headers: Dict[str, str] = None
    ) -> Dict[str, Any]:
        async with aiohttp.ClientSession() as session:
            async with session.get(url, headers=headers) as response:
                # 401 is an answer about the token, not a transport failure
                if response.status == 401:
                    return {"success": False, "valid": False}
                response.raise_for_status()
                return await response.json()
