"""Append-only offer logs for the three lifecycles."""

import copy
from dataclasses import dataclass, field

from estate_registry.exceptions import InvalidArgumentError, InvalidReferenceError
from estate_registry.models import DepositOffer, GiftOffer, SaleOffer
from estate_registry.store.base import restore_records


@dataclass
class OfferStore:
    """In-memory offer logs keyed by id, with a per-property index.

    Offers are never removed; terminal offers stay as history.
    """

    sales: dict[int, SaleOffer] = field(default_factory=dict)
    gifts: dict[int, GiftOffer] = field(default_factory=dict)
    deposits: dict[int, DepositOffer] = field(default_factory=dict)

    # Relationship indexes
    _property_sales: dict[int, list[int]] = field(default_factory=dict)
    _property_gifts: dict[int, list[int]] = field(default_factory=dict)
    _property_deposits: dict[int, list[int]] = field(default_factory=dict)

    @property
    def next_sale_id(self) -> int:
        return len(self.sales)

    @property
    def next_gift_id(self) -> int:
        return len(self.gifts)

    @property
    def next_deposit_id(self) -> int:
        return len(self.deposits)

    def add_sale(self, offer: SaleOffer) -> None:
        """Append a sale offer to the log."""
        if offer.offer_id != self.next_sale_id:
            raise InvalidArgumentError(f"Sale offer id {offer.offer_id} is out of sequence")
        self.sales[offer.offer_id] = offer
        self._property_sales.setdefault(offer.property_id, []).append(offer.offer_id)

    def add_gift(self, offer: GiftOffer) -> None:
        """Append a gift offer to the log."""
        if offer.gift_id != self.next_gift_id:
            raise InvalidArgumentError(f"Gift offer id {offer.gift_id} is out of sequence")
        self.gifts[offer.gift_id] = offer
        self._property_gifts.setdefault(offer.property_id, []).append(offer.gift_id)

    def add_deposit(self, offer: DepositOffer) -> None:
        """Append a deposit offer to the log."""
        if offer.deposit_id != self.next_deposit_id:
            raise InvalidArgumentError(f"Deposit offer id {offer.deposit_id} is out of sequence")
        self.deposits[offer.deposit_id] = offer
        self._property_deposits.setdefault(offer.property_id, []).append(offer.deposit_id)

    def get_sale(self, offer_id: int) -> SaleOffer:
        offer = self.sales.get(offer_id)
        if offer is None:
            raise InvalidReferenceError(f"Sale offer {offer_id} not found")
        return offer

    def get_gift(self, gift_id: int) -> GiftOffer:
        offer = self.gifts.get(gift_id)
        if offer is None:
            raise InvalidReferenceError(f"Gift offer {gift_id} not found")
        return offer

    def get_deposit(self, deposit_id: int) -> DepositOffer:
        offer = self.deposits.get(deposit_id)
        if offer is None:
            raise InvalidReferenceError(f"Deposit offer {deposit_id} not found")
        return offer

    # Query methods
    def get_property_sales(self, property_id: int) -> list[SaleOffer]:
        """Get all sale offers ever made for a property."""
        ids = self._property_sales.get(property_id, [])
        return [self.sales[i] for i in ids]

    def get_property_gifts(self, property_id: int) -> list[GiftOffer]:
        """Get all gift offers ever made for a property."""
        ids = self._property_gifts.get(property_id, [])
        return [self.gifts[i] for i in ids]

    def get_property_deposits(self, property_id: int) -> list[DepositOffer]:
        """Get all deposit offers ever made for a property."""
        ids = self._property_deposits.get(property_id, [])
        return [self.deposits[i] for i in ids]

    def snapshot(self) -> dict:
        return copy.deepcopy(
            {
                "sales": self.sales,
                "gifts": self.gifts,
                "deposits": self.deposits,
                "property_sales": self._property_sales,
                "property_gifts": self._property_gifts,
                "property_deposits": self._property_deposits,
            }
        )

    def restore(self, snapshot: dict) -> None:
        restore_records(self.sales, snapshot["sales"])
        restore_records(self.gifts, snapshot["gifts"])
        restore_records(self.deposits, snapshot["deposits"])
        self._property_sales = snapshot["property_sales"]
        self._property_gifts = snapshot["property_gifts"]
        self._property_deposits = snapshot["property_deposits"]

    def summary(self) -> dict[str, int]:
        """Return summary counts of all offer logs."""
        return {
            "sales": len(self.sales),
            "gifts": len(self.gifts),
            "deposits": len(self.deposits),
        }
