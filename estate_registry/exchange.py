"""Entry points of the registry: one method per state transition.

``PropertyExchange`` plays the host environment for the lifecycles: each
mutating call runs as a unit of work that is either fully committed or fully
rolled back, and every committed transition is published as a
``LifecycleEvent``.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Iterator

from estate_registry.clock import Clock, LogicalClock
from estate_registry.config import RegistryConfig
from estate_registry.custody import FundsCustody, FundsLedger, InMemoryLedger
from estate_registry.exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    InvariantViolationError,
    RegistryError,
)
from estate_registry.lifecycle import DepositLifecycle, GiftLifecycle, SaleLifecycle
from estate_registry.models import (
    DepositOffer,
    DepositStatus,
    GiftOffer,
    LifecycleEvent,
    Property,
    PropertyClass,
    PropertyState,
    SaleOffer,
    SaleStatus,
)
from estate_registry.sinks import EventSink
from estate_registry.store import OfferStore, PropertyRegistry

logger = logging.getLogger(__name__)


class PropertyExchange:
    """Serial, all-or-nothing front door to the registry and its lifecycles.

    Not thread-safe: callers must serialize access, as a single host
    executing one operation at a time would.

    Parameters
    ----------
    config : RegistryConfig
        Must name at least one administrator.
    clock : Clock | None
        Logical clock (default: a fresh ``LogicalClock`` at 0).
    ledger : FundsLedger | None
        Balance ledger custody moves value through (default: in memory).
    sinks : list[EventSink] | None
        Destinations for committed events.
    """

    def __init__(
        self,
        config: RegistryConfig,
        clock: Clock | None = None,
        ledger: FundsLedger | None = None,
        sinks: list[EventSink] | None = None,
    ) -> None:
        config.validate()
        self.config = config
        self.clock = clock if clock is not None else LogicalClock()
        self.ledger = ledger if ledger is not None else InMemoryLedger()
        self.sinks = list(sinks or [])
        self.events: list[LifecycleEvent] = []

        self.registry = PropertyRegistry(
            administrators=frozenset(config.administrators),
            escrow_identity=config.escrow_identity,
        )
        self.offers = OfferStore()
        self.custody = FundsCustody(self.ledger, escrow_identity=config.escrow_identity)

        self.sales = SaleLifecycle(self.registry, self.offers, self.custody, self.clock)
        self.gifts = GiftLifecycle(self.registry, self.offers, self.custody, self.clock)
        self.deposits = DepositLifecycle(self.registry, self.offers, self.custody, self.clock)

    @contextmanager
    def _atomic(self, operation: str, caller: str) -> Iterator[None]:
        """Roll back registry, offers and custody if the body raises."""
        checkpoint = (
            self.registry.snapshot(),
            self.offers.snapshot(),
            self.custody.snapshot(),
        )
        try:
            yield
        except Exception as exc:
            self.registry.restore(checkpoint[0])
            self.offers.restore(checkpoint[1])
            self.custody.restore(checkpoint[2])
            context = {"operation": operation, "caller": caller}
            if isinstance(exc, RegistryError):
                logger.debug("%s rejected: %s", operation, exc, extra=context)
            else:
                logger.exception("%s failed unexpectedly", operation, extra=context)
            raise

    def _emit(self, event_type: str, property_id: int, caller: str, **data: Any) -> LifecycleEvent:
        event = LifecycleEvent(
            event_id=str(uuid.uuid4()),
            event_type=event_type,
            logical_time=self.clock.now(),
            source=self.config.source,
            subject=f"property/{property_id}",
            data={"property_id": property_id, **data},
            metadata={"caller": caller},
        )
        self.events.append(event)
        context = {"operation": event_type, "caller": caller}
        logger.debug("Committed %s", event_type, extra=context)
        # The transition is already committed; a sink failure must not undo or mask it
        topic = f"{self.config.topic_prefix}.{event_type.split('.')[0]}"
        for sink in self.sinks:
            try:
                sink.publish(topic, event)
            except Exception:
                logger.exception(
                    "Publishing %s to %s failed", event_type, type(sink).__name__, extra=context
                )
        return event

    # Registry
    def add_property(
        self,
        caller: str,
        owner: str,
        property_class: PropertyClass = PropertyClass.RESIDENTIAL,
        service_life: int = 0,
        address: str = "",
    ) -> Property:
        with self._atomic("add_property", caller):
            prop = self.registry.add(
                caller, owner, property_class, service_life, self.clock.now(), address=address
            )
        self._emit("property.registered", prop.property_id, caller, owner=owner)
        return prop

    # Sale
    def create_sale(
        self, caller: str, property_id: int, price: Decimal | int | str, duration: int
    ) -> SaleOffer:
        with self._atomic("create_sale", caller):
            offer = self.sales.create(caller, property_id, price, duration)
        self._emit(
            "sale.created",
            property_id,
            caller,
            offer_id=offer.offer_id,
            price=offer.price,
            expires_at=offer.expires_at,
        )
        return offer

    def fund_sale(self, caller: str, offer_id: int, amount: Decimal | int | str) -> SaleOffer:
        with self._atomic("fund_sale", caller):
            offer = self.sales.fund(caller, offer_id, amount)
        self._emit("sale.funded", offer.property_id, caller, offer_id=offer_id, buyer=caller)
        return offer

    def confirm_sale(self, caller: str, offer_id: int) -> SaleOffer:
        with self._atomic("confirm_sale", caller):
            offer = self.sales.confirm(caller, offer_id)
        self._emit(
            "sale.confirmed",
            offer.property_id,
            caller,
            offer_id=offer_id,
            seller=offer.seller,
            buyer=offer.buyer,
            price=offer.price,
        )
        return offer

    def cancel_sale(self, caller: str, offer_id: int) -> SaleOffer:
        with self._atomic("cancel_sale", caller):
            offer = self.sales.cancel(caller, offer_id)
        self._emit("sale.cancelled", offer.property_id, caller, offer_id=offer_id, refunded=offer.buyer)
        return offer

    def expire_refund_sale(self, caller: str, offer_id: int) -> SaleOffer:
        with self._atomic("expire_refund_sale", caller):
            offer = self.sales.expire_refund(caller, offer_id)
        self._emit("sale.expired", offer.property_id, caller, offer_id=offer_id, refunded=offer.buyer)
        return offer

    # Gift
    def create_gift(self, caller: str, property_id: int, new_owner: str) -> GiftOffer:
        with self._atomic("create_gift", caller):
            gift = self.gifts.create(caller, property_id, new_owner)
        self._emit("gift.created", property_id, caller, gift_id=gift.gift_id, recipient=new_owner)
        return gift

    def confirm_gift(self, caller: str, gift_id: int) -> GiftOffer:
        with self._atomic("confirm_gift", caller):
            gift = self.gifts.confirm(caller, gift_id)
        self._emit("gift.confirmed", gift.property_id, caller, gift_id=gift_id, donor=gift.donor)
        return gift

    def cancel_gift(self, caller: str, gift_id: int) -> GiftOffer:
        with self._atomic("cancel_gift", caller):
            gift = self.gifts.cancel(caller, gift_id)
        self._emit("gift.cancelled", gift.property_id, caller, gift_id=gift_id)
        return gift

    # Deposit
    def create_deposit_offer(
        self, caller: str, property_id: int, amount: Decimal | int | str, duration: int
    ) -> DepositOffer:
        with self._atomic("create_deposit_offer", caller):
            offer = self.deposits.create_offer(caller, property_id, amount, duration)
        self._emit(
            "deposit.created",
            property_id,
            caller,
            deposit_id=offer.deposit_id,
            amount=offer.amount,
            duration=offer.duration,
        )
        return offer

    def pledge_deposit(self, caller: str, deposit_id: int, amount: Decimal | int | str) -> DepositOffer:
        with self._atomic("pledge_deposit", caller):
            offer = self.deposits.pledge(caller, deposit_id, amount)
        self._emit("deposit.pledged", offer.property_id, caller, deposit_id=deposit_id, pledgee=caller)
        return offer

    def confirm_deposit(self, caller: str, deposit_id: int) -> DepositOffer:
        with self._atomic("confirm_deposit", caller):
            offer = self.deposits.confirm_by_owner(caller, deposit_id)
        self._emit(
            "deposit.confirmed",
            offer.property_id,
            caller,
            deposit_id=deposit_id,
            pledge_start=offer.pledge_start,
            due_at=offer.due_at,
        )
        return offer

    def cancel_deposit_offer(self, caller: str, deposit_id: int) -> DepositOffer:
        with self._atomic("cancel_deposit_offer", caller):
            offer = self.deposits.cancel_offer(caller, deposit_id)
        self._emit("deposit.cancelled", offer.property_id, caller, deposit_id=deposit_id)
        return offer

    def repay_deposit(self, caller: str, deposit_id: int, amount: Decimal | int | str) -> DepositOffer:
        with self._atomic("repay_deposit", caller):
            offer = self.deposits.repay(caller, deposit_id, amount)
        self._emit(
            "deposit.repaid", offer.property_id, caller, deposit_id=deposit_id, pledgee=offer.pledgee
        )
        return offer

    def foreclose_deposit(self, caller: str, deposit_id: int) -> DepositOffer:
        with self._atomic("foreclose_deposit", caller):
            offer = self.deposits.foreclose(caller, deposit_id)
        self._emit(
            "deposit.foreclosed",
            offer.property_id,
            caller,
            deposit_id=deposit_id,
            new_owner=offer.pledgee,
        )
        return offer

    # Funds
    def credit(self, identity: str, amount: Decimal | int | str) -> Decimal:
        """Bring external value into the ledger for an identity."""
        if identity == self.custody.escrow_identity:
            raise InvalidArgumentError("The escrow identity cannot be credited directly")
        if not hasattr(self.ledger, "credit"):
            raise ConfigurationError(f"{type(self.ledger).__name__} does not accept credits")
        return self.ledger.credit(identity, Decimal(amount))

    def balance_of(self, identity: str) -> Decimal:
        return self.ledger.balance_of(identity)

    # Queries
    def get_property(self, property_id: int) -> Property:
        return self.registry.get(property_id)

    def list_properties(self) -> list[Property]:
        return self.registry.list_properties()

    def list_sales(self, property_id: int | None = None) -> list[SaleOffer]:
        if property_id is not None:
            return self.offers.get_property_sales(property_id)
        return list(self.offers.sales.values())

    def list_gifts(self, property_id: int | None = None) -> list[GiftOffer]:
        if property_id is not None:
            return self.offers.get_property_gifts(property_id)
        return list(self.offers.gifts.values())

    def list_deposits(self, property_id: int | None = None) -> list[DepositOffer]:
        if property_id is not None:
            return self.offers.get_property_deposits(property_id)
        return list(self.offers.deposits.values())

    def check_invariants(self) -> None:
        """Verify that every open lifecycle matches its property's state.

        Raises
        ------
        InvariantViolationError
            If a property is claimed by a lifecycle that has no open offer,
            an open offer's property is not in the matching state, or custody
            holds funds for an offer that should not have any.
        """

        def expect(condition: bool, message: str) -> None:
            if not condition:
                raise InvariantViolationError(message)

        expected: dict[int, PropertyState] = {}
        for sale in self.offers.sales.values():
            if not sale.closed:
                expect(sale.property_id not in expected, f"Two open offers on property {sale.property_id}")
                expected[sale.property_id] = PropertyState.FOR_SALE
            held = self.custody.is_holding(("sale", sale.offer_id))
            expect(held == (sale.status == SaleStatus.FUNDED), f"Sale {sale.offer_id} custody mismatch")
            if held:
                expect(
                    self.custody.held(("sale", sale.offer_id)) == sale.price,
                    f"Sale {sale.offer_id} holds the wrong amount",
                )
        for gift in self.offers.gifts.values():
            if not gift.closed:
                expect(gift.property_id not in expected, f"Two open offers on property {gift.property_id}")
                expected[gift.property_id] = PropertyState.GIFTED
        for deposit in self.offers.deposits.values():
            if not deposit.closed:
                expect(
                    deposit.property_id not in expected,
                    f"Two open offers on property {deposit.property_id}",
                )
                expected[deposit.property_id] = PropertyState.UNDER_DEPOSIT
            held = self.custody.is_holding(("deposit", deposit.deposit_id))
            expect(
                held == (deposit.status == DepositStatus.PLEDGED),
                f"Deposit {deposit.deposit_id} custody mismatch",
            )
        for prop in self.registry.properties.values():
            expect(
                prop.state == expected.get(prop.property_id, PropertyState.AVAILABLE),
                f"Property {prop.property_id} is {prop.state.value}",
            )
        escrow = self.ledger.balance_of(self.custody.escrow_identity)
        held_total = self.custody.total_held()
        expect(escrow == held_total, f"Escrow balance {escrow} does not match {held_total} held")

    def summary(self) -> dict[str, Any]:
        """Return summary counts of properties, offers and held funds."""
        return {
            **self.registry.summary(),
            **self.offers.summary(),
            "events": len(self.events),
            "held": str(self.custody.total_held()),
        }

    def export(self, sink: EventSink) -> None:
        """Write the current properties and offer logs through ``sink``."""
        sink.write_batch("properties", self.list_properties())
        sink.write_batch("sales", self.list_sales())
        sink.write_batch("gifts", self.list_gifts())
        sink.write_batch("deposits", self.list_deposits())

    def close(self) -> None:
        for sink in self.sinks:
            sink.close()
