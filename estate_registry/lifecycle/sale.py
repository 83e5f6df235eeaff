"""Sale lifecycle: create -> fund -> confirm | cancel | expire."""

from __future__ import annotations

import logging
from decimal import Decimal

from estate_registry.exceptions import (
    AlreadyFundedError,
    InsufficientFundsError,
    InvalidArgumentError,
    NoBuyerError,
    NotYetExpiredError,
    OfferClosedError,
    OfferExpiredError,
    UnauthorizedError,
)
from estate_registry.lifecycle.base import BaseLifecycle
from estate_registry.models import PropertyState, SaleOffer, SaleStatus

logger = logging.getLogger(__name__)


class SaleLifecycle(BaseLifecycle):
    """Sells a property for a fixed price within a time window.

    The buyer's payment sits in custody until the owner confirms (funds go
    to the seller, ownership to the buyer) or the offer is cancelled or
    expires (funds go back to the buyer, ownership unchanged).
    """

    KIND = "sale"

    def create(
        self, caller: str, property_id: int, price: Decimal | int | str, duration: int
    ) -> SaleOffer:
        """List a property for sale until ``now + duration``."""
        prop = self.registry.get(property_id)
        self.registry.require_owner(prop, caller)
        price = self._amount("price", price)
        if price == 0:
            raise InvalidArgumentError("price must be positive")
        duration = self._positive_duration("duration", duration)
        now = self.clock.now()

        self.registry.open_lifecycle(prop, PropertyState.FOR_SALE)
        offer = SaleOffer(
            offer_id=self.offers.next_sale_id,
            property_id=prop.property_id,
            seller=caller,
            price=price,
            created_at=now,
            expires_at=now + duration,
            service_life_snapshot=prop.service_life,
        )
        self.offers.add_sale(offer)
        logger.info(
            "Sale %d opened: property %d at %s until %d",
            offer.offer_id,
            prop.property_id,
            price,
            offer.expires_at,
        )
        return offer

    def fund(self, caller: str, offer_id: int, amount: Decimal | int | str) -> SaleOffer:
        """Pay the asking price into custody and become the buyer."""
        offer = self.offers.get_sale(offer_id)
        prop = self.registry.get(offer.property_id)
        self._require_caller(caller)
        if caller == prop.owner:
            raise UnauthorizedError("The owner cannot fund their own sale")
        if offer.funded:
            raise AlreadyFundedError(f"Sale {offer_id} already has a buyer")
        if offer.closed:
            raise OfferClosedError(f"Sale {offer_id} is {offer.status.value}")
        if self._amount("amount", amount) < offer.price:
            raise InsufficientFundsError(f"Sale {offer_id} requires {offer.price}, got {amount}")
        if self.clock.now() > offer.expires_at:
            raise OfferExpiredError(f"Sale {offer_id} expired at {offer.expires_at}")

        offer.buyer = caller
        offer.status = SaleStatus.FUNDED
        self.custody.hold(self._hold_key(offer_id), caller, offer.price)
        logger.info("Sale %d funded by %s", offer_id, caller)
        return offer

    def confirm(self, caller: str, offer_id: int) -> SaleOffer:
        """Complete the sale: ownership to the buyer, funds to the seller."""
        offer = self.offers.get_sale(offer_id)
        prop = self.registry.get(offer.property_id)
        self.registry.require_owner(prop, caller)
        if offer.closed:
            raise OfferClosedError(f"Sale {offer_id} is {offer.status.value}")
        if not offer.funded:
            raise NoBuyerError(f"Sale {offer_id} has not been funded")
        seller = prop.owner
        now = self.clock.now()

        self.registry.close_lifecycle(prop, PropertyState.FOR_SALE)
        self.registry.transfer(prop, offer.buyer)
        prop.service_life += now - offer.created_at
        offer.status = SaleStatus.CONFIRMED
        self.custody.release(self._hold_key(offer_id), seller)
        logger.info("Sale %d confirmed: property %d sold to %s", offer_id, prop.property_id, offer.buyer)
        return offer

    def cancel(self, caller: str, offer_id: int) -> SaleOffer:
        """Withdraw a funded offer and refund the buyer."""
        offer = self.offers.get_sale(offer_id)
        prop = self.registry.get(offer.property_id)
        self.registry.require_owner(prop, caller)
        if offer.closed:
            raise OfferClosedError(f"Sale {offer_id} is {offer.status.value}")
        if not offer.funded:
            raise NoBuyerError(f"Sale {offer_id} has not been funded")

        self._unwind(offer, SaleStatus.CANCELLED)
        logger.info("Sale %d cancelled by owner", offer_id)
        return offer

    def expire_refund(self, caller: str, offer_id: int) -> SaleOffer:
        """Close an expired offer, refunding the buyer if there is one.

        Any participant may trigger this once the window has passed.
        """
        offer = self.offers.get_sale(offer_id)
        self._require_caller(caller)
        if offer.closed:
            raise OfferClosedError(f"Sale {offer_id} is {offer.status.value}")
        if self.clock.now() <= offer.expires_at:
            raise NotYetExpiredError(f"Sale {offer_id} is open until {offer.expires_at}")

        self._unwind(offer, SaleStatus.EXPIRED)
        logger.info("Sale %d expired (triggered by %s)", offer_id, caller)
        return offer

    def _unwind(self, offer: SaleOffer, status: SaleStatus) -> None:
        prop = self.registry.get(offer.property_id)
        self.registry.close_lifecycle(prop, PropertyState.FOR_SALE)
        prop.service_life = offer.service_life_snapshot
        offer.status = status
        if offer.funded:
            self.custody.refund(self._hold_key(offer.offer_id))
