import logging
from typing import Optional, Sequence
import jwt

logger = logging.getLogger(__name__)


class Token:
    """
    Reads session tokens issued elsewhere. pygate never mints tokens; it only
    checks that one is signed with the shared secret and not expired.
    """

    def __init__(self, secret: str, algorithms: Sequence[str] = ("HS256",)):
        self._secret = secret
        self._algorithms = list(algorithms)

    def extract(self, token: str) -> dict:
        return jwt.decode(
            token,
            self._secret,
            algorithms=self._algorithms,
            options={
                "verify_exp": True,
                "verify_nbf": True,
                "verify_iat": True,
            },
        )

    def is_valid(self, token: Optional[str]) -> bool:
        if not token:
            return False
        try:
            self.extract(token)
        except jwt.InvalidTokenError as e:
            logger.debug("rejecting session token: %s", e)
            return False
        return True

    __call__ = is_valid
