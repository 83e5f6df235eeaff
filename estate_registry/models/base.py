"""Base models shared across the registry."""

from dataclasses import dataclass, field

from estate_registry.exceptions import InvalidArgumentError


def require_identity(name: str, value: str | None) -> str:
    """Return ``value`` if it is a usable identity.

    ``None``, empty and whitespace-only strings stand for the null identity
    and are rejected.
    """
    if value is None or not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"{name} must be a non-empty identity")
    return value


@dataclass
class LifecycleEvent:
    """Standard event envelope for committed transitions."""

    event_id: str
    event_type: str  # lifecycle.action (e.g., sale.confirmed)
    logical_time: int
    source: str  # Registry instance that committed the transition
    subject: str  # Property affected (e.g., property/3)
    data: dict
    metadata: dict = field(default_factory=dict)
