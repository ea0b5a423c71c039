import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Optional, Union

logger = logging.getLogger(__name__)

TokenValidator = Callable[[Optional[str]], bool]

PROTECTED_PATHS = ("/dashboard", "/vehicles", "/inventory", "/suppliers", "/purchases")


@dataclass(frozen=True)
class AdmissionRequest:
    path: str
    token: Optional[str] = None

    @classmethod
    def from_cookies(
        cls, path: str, cookies: Mapping[str, str], cookie_name: str = "auth_token"
    ) -> "AdmissionRequest":
        return cls(path=path, token=cookies.get(cookie_name))


@dataclass(frozen=True)
class Continue:
    pass


@dataclass(frozen=True)
class RedirectTo:
    path: str


Admission = Union[Continue, RedirectTo]


def _under(path: str, prefix: str) -> bool:
    prefix = prefix.rstrip("/") or "/"
    if prefix == "/":
        return path == "/"
    return path == prefix or path.startswith(prefix + "/")


class RouteAdmission:
    """
    Coarse check run before any view is entered. It only looks at whether a
    session token is present (and, with a validator, valid) and at the path;
    permission checks still apply to the views it admits.
    """

    def __init__(
        self,
        login_path: str = "/login",
        landing_path: str = "/inventory",
        root_path: str = "/",
        protected_paths: Iterable[str] = PROTECTED_PATHS,
        token_validator: Optional[TokenValidator] = None,
    ):
        self.login_path = login_path
        self.landing_path = landing_path
        self.root_path = root_path
        self.protected_paths = tuple(protected_paths)
        self._token_validator = token_validator

    @classmethod
    def from_settings(cls, settings, token_validator: Optional[TokenValidator] = None):
        return cls(
            login_path=settings.login_path,
            landing_path=settings.landing_path,
            root_path=settings.root_path,
            protected_paths=settings.protected_paths,
            token_validator=token_validator,
        )

    def has_token(self, token: Optional[str]) -> bool:
        if self._token_validator is not None:
            return self._token_validator(token)
        return bool(token)

    def is_protected(self, path: str) -> bool:
        return any(_under(path, prefix) for prefix in self.protected_paths)

    def admit(self, request: AdmissionRequest) -> Admission:
        path = request.path.split("?", 1)[0] or "/"

        if path == self.root_path:
            return self._redirect(path, self.login_path)

        if _under(path, self.login_path):
            if self.has_token(request.token):
                return self._redirect(path, self.landing_path)
            return Continue()

        if self.is_protected(path) and not self.has_token(request.token):
            return self._redirect(path, self.login_path)

        return Continue()

    def _redirect(self, path: str, target: str) -> RedirectTo:
        logger.debug("redirecting %s -> %s", path, target)
        return RedirectTo(target)
