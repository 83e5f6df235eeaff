"""Offer models for the sale, gift and deposit lifecycles."""

from dataclasses import dataclass
from decimal import Decimal

from estate_registry.models.enums import (
    TERMINAL_DEPOSIT_STATUSES,
    TERMINAL_GIFT_STATUSES,
    TERMINAL_SALE_STATUSES,
    DepositStatus,
    GiftStatus,
    SaleStatus,
)


@dataclass
class SaleOffer:
    """Offer to sell a property for a fixed price before an expiry time."""

    offer_id: int
    property_id: int
    seller: str
    price: Decimal
    created_at: int
    expires_at: int
    service_life_snapshot: int  # Restored on cancellation or expiry
    buyer: str | None = None
    status: SaleStatus = SaleStatus.OPEN

    @property
    def funded(self) -> bool:
        return self.buyer is not None

    @property
    def closed(self) -> bool:
        return self.status in TERMINAL_SALE_STATUSES


@dataclass
class GiftOffer:
    """Transfer of a property to a designated recipient without payment."""

    gift_id: int
    property_id: int
    donor: str
    recipient: str | None
    created_at: int
    status: GiftStatus = GiftStatus.PENDING

    @property
    def closed(self) -> bool:
        return self.status in TERMINAL_GIFT_STATUSES


@dataclass
class DepositOffer:
    """Collateral arrangement: the property secures funds from a pledgee.

    ``confirmed`` means the pledged funds reached the owner; ``active`` means
    the arrangement is in force (neither repaid nor foreclosed).
    """

    deposit_id: int
    property_id: int
    owner: str
    amount: Decimal
    duration: int
    created_at: int
    pledgee: str | None = None
    pledge_start: int | None = None
    confirmed: bool = False
    active: bool = False
    status: DepositStatus = DepositStatus.OFFERED

    @property
    def pledged(self) -> bool:
        return self.pledgee is not None

    @property
    def due_at(self) -> int | None:
        if self.pledge_start is None:
            return None
        return self.pledge_start + self.duration

    @property
    def closed(self) -> bool:
        return self.status in TERMINAL_DEPOSIT_STATUSES
