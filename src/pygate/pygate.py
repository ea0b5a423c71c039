from typing import Iterable, Optional, Union
from .config import Settings, configure_logging
from .gate import Gate, RouteAdmission, AdmissionRequest, Admission
from .models import Action, Decision, ActorSession
from .permissions import Permissions, RBAC
from .providers import IdentityProvider, HTTPIdentity
from .registry import Registry, default_registry
from .roles import RoleStore
from .session import SessionManager, RoleLookup
from .token import Token


class Pygate:
    """
    Wires one authenticated context: registry, decision engine, session
    manager, view gate and route admission, all from one Settings object.
    """

    def __init__(
        self,
        identity: IdentityProvider,
        roles: Union[RoleStore, RoleLookup],
        registry: Optional[Registry] = None,
        settings: Optional[Settings] = None,
        permissions: Optional[Permissions] = None,
    ):
        self.settings = settings or Settings()
        configure_logging(self.settings)
        self.registry = registry or default_registry()
        self.permissions = permissions or RBAC(
            self.registry, action_matching=self.settings.action_matching
        )
        self.identity = identity
        self.sessions = SessionManager(self.permissions, identity, roles)
        self.gate = Gate(self.sessions)

        token_validator = None
        if self.settings.token_secret is not None:
            token_validator = Token(
                self.settings.token_secret.get_secret_value(),
                self.settings.token_algorithms,
            )
        self.routes = RouteAdmission.from_settings(self.settings, token_validator)

    @classmethod
    def over_http(
        cls,
        roles: Union[RoleStore, RoleLookup],
        token: Optional[str] = None,
        registry: Optional[Registry] = None,
        settings: Optional[Settings] = None,
    ) -> "Pygate":
        settings = settings or Settings()
        if not settings.api_url:
            raise ValueError("api_url must be configured to use the HTTP identity")
        identity = HTTPIdentity(
            settings.api_url, token=token, validate_token_path=settings.validate_token_path
        )
        return cls(identity, roles, registry=registry, settings=settings)

    async def start(self) -> Optional[ActorSession]:
        """Resolve the first session and follow identity/role changes"""
        self.sessions.start()
        return await self.sessions.refresh()

    def stop(self) -> None:
        self.sessions.stop()

    def logout(self) -> None:
        self.sessions.end()

    @property
    def session(self) -> Optional[ActorSession]:
        return self.sessions.session

    # bound accessors

    def is_loading(self) -> bool:
        return self.sessions.is_loading()

    def has_permission(self, code: str, action: Action = Action.VIEW) -> Decision:
        return self.sessions.has_permission(code, action)

    def has_any_permission(
        self, codes: Iterable[str], action: Action = Action.VIEW
    ) -> Decision:
        return self.sessions.has_any_permission(codes, action)

    def has_all_permissions(
        self, codes: Iterable[str], action: Action = Action.VIEW
    ) -> Decision:
        return self.sessions.has_all_permissions(codes, action)

    # route admission

    def admit(self, request: AdmissionRequest) -> Admission:
        return self.routes.admit(request)

    def admit_path(self, path: str, cookies: dict) -> Admission:
        return self.routes.admit(
            AdmissionRequest.from_cookies(path, cookies, self.settings.token_cookie)
        )
