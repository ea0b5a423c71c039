from .provider import IdentityProvider, InvalidIdentityResponse
from .memory import MemoryIdentity
from .http import HTTPIdentity

__all__ = [
    "IdentityProvider",
    "InvalidIdentityResponse",
    "MemoryIdentity",
    "HTTPIdentity",
]
