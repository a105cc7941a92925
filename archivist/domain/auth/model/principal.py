"""Principal: authenticated identity with capabilities, resolved per-request."""

from dataclasses import dataclass, field

from archivist.domain.auth.model.capability import Capability
from archivist.domain.auth.model.identity import Identity, System


@dataclass(frozen=True)
class Principal(Identity):
    """The authenticated identity of the current requester.

    Immutable after creation. Capabilities are resolved by the session layer
    for the repository the request is acting in.
    """

    username: str
    capabilities: frozenset[Capability] = field(default_factory=frozenset)

    def can(self, capability: Capability) -> bool:
        return capability in self.capabilities


def can(identity: Identity | None, capability: Capability) -> bool:
    """Capability check that also accepts System and Anonymous identities."""
    if isinstance(identity, System):
        return True
    if isinstance(identity, Principal):
        return identity.can(capability)
    return False
