"""Gift lifecycle: create -> confirm | cancel."""

from __future__ import annotations

import logging

from estate_registry.exceptions import OfferClosedError, UnauthorizedError
from estate_registry.lifecycle.base import BaseLifecycle
from estate_registry.models import GiftOffer, GiftStatus, PropertyState

logger = logging.getLogger(__name__)


class GiftLifecycle(BaseLifecycle):
    """Hands a property to a designated recipient, who must accept it."""

    KIND = "gift"

    def create(self, caller: str, property_id: int, new_owner: str) -> GiftOffer:
        prop = self.registry.get(property_id)
        self.registry.require_owner(prop, caller)
        self.registry.require_holder("new_owner", new_owner)

        self.registry.open_lifecycle(prop, PropertyState.GIFTED)
        gift = GiftOffer(
            gift_id=self.offers.next_gift_id,
            property_id=prop.property_id,
            donor=caller,
            recipient=new_owner,
            created_at=self.clock.now(),
        )
        self.offers.add_gift(gift)
        logger.info("Gift %d offered: property %d to %s", gift.gift_id, prop.property_id, new_owner)
        return gift

    def confirm(self, caller: str, gift_id: int) -> GiftOffer:
        """Accept the gift. Only the designated recipient may do this."""
        gift = self.offers.get_gift(gift_id)
        if gift.closed:
            raise OfferClosedError(f"Gift {gift_id} is {gift.status.value}")
        if caller != gift.recipient:
            raise UnauthorizedError(f"{caller} is not the recipient of gift {gift_id}")
        prop = self.registry.get(gift.property_id)

        self.registry.close_lifecycle(prop, PropertyState.GIFTED)
        self.registry.transfer(prop, gift.recipient)
        gift.status = GiftStatus.CONFIRMED
        logger.info("Gift %d accepted by %s", gift_id, caller)
        return gift

    def cancel(self, caller: str, gift_id: int) -> GiftOffer:
        """Withdraw the gift. Only the donor may do this."""
        gift = self.offers.get_gift(gift_id)
        if caller != gift.donor:
            raise UnauthorizedError(f"{caller} did not offer gift {gift_id}")
        if gift.closed:
            raise OfferClosedError(f"Gift {gift_id} is {gift.status.value}")
        prop = self.registry.get(gift.property_id)

        self.registry.close_lifecycle(prop, PropertyState.GIFTED)
        gift.recipient = None
        gift.status = GiftStatus.CANCELLED
        logger.info("Gift %d withdrawn by %s", gift_id, caller)
        return gift
