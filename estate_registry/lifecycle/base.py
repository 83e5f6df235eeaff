"""Base class shared by the sale, gift and deposit lifecycles."""

from __future__ import annotations

from abc import ABC
from decimal import Decimal, InvalidOperation

from estate_registry.clock import Clock
from estate_registry.custody import FundsCustody, HoldKey
from estate_registry.exceptions import InvalidArgumentError, UnauthorizedError
from estate_registry.models import require_identity
from estate_registry.store import OfferStore, PropertyRegistry


class BaseLifecycle(ABC):
    """Wires a lifecycle to the shared registry, offer logs, custody and clock.

    Transitions validate everything before mutating, and call custody last so
    a failed funds movement can be unwound by the caller's unit of work.

    Parameters
    ----------
    registry : PropertyRegistry
        Canonical property records; the serialization point between
        lifecycles.
    offers : OfferStore
        Offer logs.
    custody : FundsCustody
        Holds and releases value.
    clock : Clock
        Logical clock for expiry and foreclosure windows.
    """

    KIND: str = ""

    def __init__(
        self,
        registry: PropertyRegistry,
        offers: OfferStore,
        custody: FundsCustody,
        clock: Clock,
    ) -> None:
        self.registry = registry
        self.offers = offers
        self.custody = custody
        self.clock = clock

    def _hold_key(self, offer_id: int) -> HoldKey:
        return (self.KIND, offer_id)

    def _require_caller(self, caller: str | None) -> str:
        """Reject the null identity and the escrow account as callers.

        Escrow acting for itself would record holds that no payment backs.
        """
        require_identity("caller", caller)
        if caller == self.custody.escrow_identity:
            raise UnauthorizedError("The escrow identity cannot act on offers")
        return caller

    @staticmethod
    def _amount(name: str, value: Decimal | int | str) -> Decimal:
        """Coerce ``value`` to a finite, non-negative Decimal."""
        try:
            amount = Decimal(value)
        except (InvalidOperation, TypeError, ValueError) as exc:
            raise InvalidArgumentError(f"{name} is not a valid amount: {value!r}") from exc
        if not amount.is_finite() or amount < 0:
            raise InvalidArgumentError(f"{name} must be a finite non-negative amount")
        return amount

    @staticmethod
    def _positive_duration(name: str, value: int) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidArgumentError(f"{name} must be a positive number of ticks")
        return value
