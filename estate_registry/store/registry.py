"""Property registry: canonical property records and their lifecycle state."""

import copy
import logging
from dataclasses import dataclass, field

from estate_registry.exceptions import (
    InvalidArgumentError,
    InvalidReferenceError,
    NotAvailableError,
    UnauthorizedError,
)
from estate_registry.models import Property, PropertyClass, PropertyState, require_identity
from estate_registry.store.base import restore_records

logger = logging.getLogger(__name__)


@dataclass
class PropertyRegistry:
    """In-memory store of properties keyed by id.

    Lookups return the stored object itself; lifecycles mutate it in place.
    """

    administrators: frozenset[str]
    escrow_identity: str | None = None
    properties: dict[int, Property] = field(default_factory=dict)

    # Relationship index
    _owner_properties: dict[str, list[int]] = field(default_factory=dict)

    def add(
        self,
        caller: str,
        owner: str,
        property_class: PropertyClass,
        service_life: int,
        now: int,
        address: str = "",
    ) -> Property:
        """Register a new property. Only administrators may do this."""
        if caller not in self.administrators:
            raise UnauthorizedError(f"{caller} is not a registry administrator")
        self.require_holder("owner", owner)
        if service_life < 0:
            raise InvalidArgumentError("service_life must be non-negative")

        prop = Property(
            property_id=len(self.properties),
            owner=owner,
            property_class=PropertyClass(property_class),
            service_life=service_life,
            created_at=now,
            address=address,
        )
        self.properties[prop.property_id] = prop
        self._owner_properties.setdefault(owner, []).append(prop.property_id)
        logger.info("Property %d registered for %s", prop.property_id, owner)
        return prop

    def get(self, property_id: int) -> Property:
        """Get a property by id."""
        prop = self.properties.get(property_id)
        if prop is None:
            raise InvalidReferenceError(f"Property {property_id} not found")
        return prop

    def list_properties(self) -> list[Property]:
        return list(self.properties.values())

    def get_owner_properties(self, owner: str) -> list[Property]:
        """Get all properties currently owned by an identity."""
        ids = self._owner_properties.get(owner, [])
        return [self.properties[pid] for pid in ids]

    def require_holder(self, name: str, identity: str | None) -> str:
        """Reject identities that cannot hold property: null and the escrow account."""
        require_identity(name, identity)
        if identity == self.escrow_identity:
            raise InvalidArgumentError(f"{name} cannot be the escrow identity")
        return identity

    def require_owner(self, prop: Property, caller: str) -> None:
        if prop.owner != caller:
            raise UnauthorizedError(f"{caller} does not own property {prop.property_id}")

    def open_lifecycle(self, prop: Property, state: PropertyState) -> None:
        """Claim an available property for a lifecycle."""
        if state == PropertyState.AVAILABLE:
            raise InvalidArgumentError("A lifecycle must claim a non-available state")
        if prop.state != PropertyState.AVAILABLE:
            raise NotAvailableError(
                f"Property {prop.property_id} is {prop.state.value}, not available"
            )
        prop.state = state

    def close_lifecycle(self, prop: Property, state: PropertyState) -> None:
        """Release the property from the lifecycle that holds it."""
        if prop.state != state:
            raise NotAvailableError(
                f"Property {prop.property_id} is {prop.state.value}, expected {state.value}"
            )
        prop.state = PropertyState.AVAILABLE

    def transfer(self, prop: Property, new_owner: str) -> None:
        """Move ownership of a property to another identity."""
        self.require_holder("new_owner", new_owner)
        previous = prop.owner
        self._owner_properties[previous].remove(prop.property_id)
        self._owner_properties.setdefault(new_owner, []).append(prop.property_id)
        prop.owner = new_owner
        logger.info("Property %d transferred from %s to %s", prop.property_id, previous, new_owner)

    def snapshot(self) -> dict:
        return {
            "properties": copy.deepcopy(self.properties),
            "owner_properties": copy.deepcopy(self._owner_properties),
        }

    def restore(self, snapshot: dict) -> None:
        restore_records(self.properties, snapshot["properties"])
        self._owner_properties = snapshot["owner_properties"]

    def summary(self) -> dict[str, int]:
        """Return counts of properties by state."""
        counts = {state.value.lower(): 0 for state in PropertyState}
        for prop in self.properties.values():
            counts[prop.state.value.lower()] += 1
        return {"properties": len(self.properties), **counts}
