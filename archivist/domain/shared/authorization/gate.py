"""Handler-level authorization gates: public() and requires(Capability)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from archivist.domain.auth.model.capability import Capability


class Gate:
    """Base for handler-level authorization gates.

    Every CommandHandler/QueryHandler must declare ``__auth__: ClassVar[Gate]``.
    """


@dataclass(frozen=True)
class Public(Gate):
    """Any identity, including anonymous ones, may run the handler."""


@dataclass(frozen=True)
class Requires(Gate):
    """Gate that requires the principal to hold the given capability."""

    capability: "Capability"


_PUBLIC = Public()


def public() -> Public:
    """Mark a handler as publicly accessible."""
    return _PUBLIC


def requires(capability: "Capability") -> Requires:
    """Mark a handler as requiring the given capability."""
    return Requires(capability=capability)


def enforce(gate: Gate | None, handler_name: str, identity: object) -> None:
    """Evaluate a gate for a handler, raising on denial."""
    import logging

    from archivist.domain.auth.model.identity import Anonymous, Identity
    from archivist.domain.auth.model.principal import can
    from archivist.domain.shared.error import AuthorizationError, ConfigurationError

    if not isinstance(gate, Gate):
        raise ConfigurationError(f"Handler {handler_name} has no __auth__ declaration")

    if isinstance(gate, Public):
        return

    if isinstance(gate, Requires):
        if not isinstance(identity, Identity) or isinstance(identity, Anonymous):
            raise AuthorizationError("Authentication required", code="missing_token")

        logging.getLogger("archivist.authz").debug(
            "Auth check: handler=%s, required=%s, identity=%s",
            handler_name,
            gate.capability,
            identity,
        )
        if not can(identity, gate.capability):
            raise AuthorizationError(
                f"Access denied: {handler_name} requires {gate.capability}",
                code="access_denied",
            )
        return

    raise ConfigurationError(  # pragma: no cover
        f"Handler {handler_name} has unhandled __auth__ type: {type(gate).__name__}"
    )
