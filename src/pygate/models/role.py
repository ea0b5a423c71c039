from dataclasses import dataclass, field
from datetime import datetime
from .model import Model


@dataclass
class Role(Model):
    """
    A named bundle of permission codes. System roles ship with the installation
    and can be neither deleted nor renamed.
    """

    uid: str = field(metadata={"index": True, "unique": True})
    name: str = ""
    description: str = ""
    # ordered as granted in the admin UI; duplicates collapse on resolution
    permissions: list[str] = field(default_factory=list)
    system: bool = False

    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def grants(self) -> frozenset[str]:
        return frozenset(self.permissions)
