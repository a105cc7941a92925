from archivist.domain.auth.model.capability import Capability
from archivist.domain.auth.model.identity import Anonymous, Identity, System
from archivist.domain.auth.model.principal import Principal

__all__ = ["Anonymous", "Capability", "Identity", "Principal", "System"]
