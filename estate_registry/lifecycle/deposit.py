"""Deposit lifecycle: property pledged as collateral for a fixed term.

States::

    OFFERED -> PLEDGED -> ACTIVE -> REPAID | FORECLOSED
       |          |
       +----------+-> CANCELLED   (owner, before confirmation)

The pledgee's funds sit in custody from ``pledge`` until the owner confirms
(funds released to the owner) or cancels (funds returned to the pledgee).
Once active, the owner repays the collateral amount directly, or anyone can
foreclose after ``pledge_start + duration`` and ownership goes to the pledgee.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from estate_registry.exceptions import (
    AlreadyConfirmedError,
    AlreadyPledgedError,
    InsufficientFundsError,
    InvalidArgumentError,
    NoPledgeeError,
    NotActiveError,
    NotYetDueError,
    OfferClosedError,
)
from estate_registry.lifecycle.base import BaseLifecycle
from estate_registry.models import DepositOffer, DepositStatus, PropertyState

logger = logging.getLogger(__name__)


class DepositLifecycle(BaseLifecycle):
    """Collateral deposits with a time-bounded default condition."""

    KIND = "deposit"

    def create_offer(
        self, caller: str, property_id: int, amount: Decimal | int | str, duration: int
    ) -> DepositOffer:
        """Offer a property as collateral for ``amount`` over ``duration`` ticks."""
        prop = self.registry.get(property_id)
        self.registry.require_owner(prop, caller)
        amount = self._amount("amount", amount)
        if amount == 0:
            raise InvalidArgumentError("amount must be positive")
        duration = self._positive_duration("duration", duration)

        self.registry.open_lifecycle(prop, PropertyState.UNDER_DEPOSIT)
        offer = DepositOffer(
            deposit_id=self.offers.next_deposit_id,
            property_id=prop.property_id,
            owner=caller,
            amount=amount,
            duration=duration,
            created_at=self.clock.now(),
        )
        self.offers.add_deposit(offer)
        logger.info(
            "Deposit %d offered: property %d for %s over %d ticks",
            offer.deposit_id,
            prop.property_id,
            amount,
            duration,
        )
        return offer

    def pledge(self, caller: str, deposit_id: int, amount: Decimal | int | str) -> DepositOffer:
        """Put the collateral amount into custody and become the pledgee."""
        offer = self.offers.get_deposit(deposit_id)
        self._require_caller(caller)
        if offer.pledged:
            raise AlreadyPledgedError(f"Deposit {deposit_id} already has a pledgee")
        if offer.closed:
            raise OfferClosedError(f"Deposit {deposit_id} is {offer.status.value}")
        if self._amount("amount", amount) < offer.amount:
            raise InsufficientFundsError(f"Deposit {deposit_id} requires {offer.amount}, got {amount}")

        offer.pledgee = caller
        offer.status = DepositStatus.PLEDGED
        self.custody.hold(self._hold_key(deposit_id), caller, offer.amount)
        logger.info("Deposit %d pledged by %s", deposit_id, caller)
        return offer

    def confirm_by_owner(self, caller: str, deposit_id: int) -> DepositOffer:
        """Accept the pledge: the term starts and the funds go to the owner."""
        offer = self.offers.get_deposit(deposit_id)
        prop = self.registry.get(offer.property_id)
        self.registry.require_owner(prop, caller)
        if offer.closed:
            raise OfferClosedError(f"Deposit {deposit_id} is {offer.status.value}")
        if offer.confirmed:
            raise AlreadyConfirmedError(f"Deposit {deposit_id} is already confirmed")
        if not offer.pledged:
            raise NoPledgeeError(f"Deposit {deposit_id} has not been pledged")

        offer.confirmed = True
        offer.active = True
        offer.pledge_start = self.clock.now()
        offer.status = DepositStatus.ACTIVE
        self.custody.release(self._hold_key(deposit_id), prop.owner)
        logger.info("Deposit %d active from %d, due at %d", deposit_id, offer.pledge_start, offer.due_at)
        return offer

    def cancel_offer(self, caller: str, deposit_id: int) -> DepositOffer:
        """Withdraw an unconfirmed offer, returning any pledged funds."""
        offer = self.offers.get_deposit(deposit_id)
        prop = self.registry.get(offer.property_id)
        self.registry.require_owner(prop, caller)
        if offer.confirmed:
            raise AlreadyConfirmedError(f"Deposit {deposit_id} is already confirmed")
        if offer.closed:
            raise OfferClosedError(f"Deposit {deposit_id} is {offer.status.value}")

        self.registry.close_lifecycle(prop, PropertyState.UNDER_DEPOSIT)
        was_pledged = offer.pledged
        offer.pledgee = None
        offer.active = False
        offer.status = DepositStatus.CANCELLED
        if was_pledged:
            self.custody.refund(self._hold_key(deposit_id))
        logger.info("Deposit %d cancelled by owner", deposit_id)
        return offer

    def repay(self, caller: str, deposit_id: int, amount: Decimal | int | str) -> DepositOffer:
        """Pay the collateral back to the pledgee and end the deposit."""
        offer = self.offers.get_deposit(deposit_id)
        prop = self.registry.get(offer.property_id)
        self.registry.require_owner(prop, caller)
        if not offer.active:
            raise NotActiveError(f"Deposit {deposit_id} is not active")
        if self._amount("amount", amount) < offer.amount:
            raise InsufficientFundsError(f"Deposit {deposit_id} requires {offer.amount}, got {amount}")

        self.registry.close_lifecycle(prop, PropertyState.UNDER_DEPOSIT)
        offer.active = False
        offer.status = DepositStatus.REPAID
        self.custody.pay(caller, offer.pledgee, offer.amount)
        logger.info("Deposit %d repaid to %s", deposit_id, offer.pledgee)
        return offer

    def foreclose(self, caller: str, deposit_id: int) -> DepositOffer:
        """Hand the property to the pledgee once the term has run out."""
        offer = self.offers.get_deposit(deposit_id)
        self._require_caller(caller)
        if not offer.active:
            raise NotActiveError(f"Deposit {deposit_id} is not active")
        now = self.clock.now()
        if now < offer.due_at:
            raise NotYetDueError(f"Deposit {deposit_id} is due at {offer.due_at}, now {now}")
        prop = self.registry.get(offer.property_id)

        self.registry.close_lifecycle(prop, PropertyState.UNDER_DEPOSIT)
        self.registry.transfer(prop, offer.pledgee)
        offer.active = False
        offer.status = DepositStatus.FORECLOSED
        logger.info(
            "Deposit %d foreclosed by %s: property %d to %s",
            deposit_id,
            caller,
            prop.property_id,
            offer.pledgee,
        )
        return offer
