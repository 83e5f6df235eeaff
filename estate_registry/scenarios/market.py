"""Market scenario: randomized traffic against a single exchange."""

from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import replace
from decimal import Decimal
from typing import Callable

from estate_registry.clock import LogicalClock
from estate_registry.config import RegistryConfig, ScenarioConfig
from estate_registry.exceptions import InvariantViolationError, RegistryError
from estate_registry.exchange import PropertyExchange
from estate_registry.generators import IdentityGenerator, PropertyGenerator
from estate_registry.models import DepositStatus, GiftStatus, SaleStatus
from estate_registry.sinks import EventSink

logger = logging.getLogger(__name__)

REGISTRAR = "registrar"


class MarketScenario:
    """Drive random sale, gift and deposit traffic through an exchange.

    This scenario creates:
    - Participants with a starting balance
    - Properties owned by random participants
    - A stream of lifecycle operations, mostly well-formed, some deliberately
      invalid (wrong caller, too early, underfunded)

    Invariants are checked after every operation, and the ledger total must
    stay equal to the value credited at the start.
    """

    def __init__(
        self,
        num_participants: int = 10,
        num_properties: int = 5,
        rounds: int = 200,
        starting_balance: int = 10_000,
        max_price: int = 2_000,
        max_duration: int = 50,
        seed: int | None = None,
        *,
        config: ScenarioConfig | None = None,
        sinks: list[EventSink] | None = None,
        registry_config: RegistryConfig | None = None,
    ) -> None:
        """Initialize the market scenario.

        Parameters
        ----------
        num_participants : int
            Number of identities trading in the market.
        num_properties : int
            Number of properties registered up front.
        rounds : int
            Number of operations to attempt.
        starting_balance : int
            Value credited to each participant.
        max_price : int
            Upper bound for sale prices and deposit amounts.
        max_duration : int
            Upper bound for sale windows and deposit terms, in ticks.
        seed : int | None
            Random seed for reproducibility.
        config : ScenarioConfig | None
            Optional scenario configuration. If provided, overrides the
            sizing arguments.
        sinks : list[EventSink] | None
            Destinations for the events of every committed transition.
        registry_config : RegistryConfig | None
            Base exchange configuration (topic prefix, escrow identity...).
            The scenario registrar is always added as an administrator.
        """
        if config is not None:
            num_participants = config.num_participants
            num_properties = config.num_properties
            rounds = config.rounds
            starting_balance = config.starting_balance
            max_price = config.max_price
            max_duration = config.max_duration
        if num_participants < 1 or num_properties < 1:
            raise ValueError("A market needs at least one participant and one property")
        self.config = config
        self.num_participants = num_participants
        self.num_properties = num_properties
        self.rounds = rounds
        self.starting_balance = Decimal(starting_balance)
        self.max_price = max_price
        self.max_duration = max_duration
        self.seed = seed

        self.rng = random.Random(seed)
        self.clock = LogicalClock()
        base = registry_config if registry_config is not None else RegistryConfig()
        self.exchange = PropertyExchange(
            replace(base, administrators=base.administrators | {REGISTRAR}, seed=seed),
            clock=self.clock,
            sinks=sinks,
        )
        self._identity_gen = IdentityGenerator(seed=seed)
        residential_rate = config.residential_rate if config is not None else 0.7
        self._property_gen = PropertyGenerator(seed=seed, residential_rate=residential_rate)

        self.participants: list[str] = []
        self.outcomes: Counter[str] = Counter()
        self.rejections: Counter[str] = Counter()

    @property
    def credited_total(self) -> Decimal:
        return self.starting_balance * len(self.participants)

    def generate(self) -> PropertyExchange:
        """Populate the market and play all rounds.

        Returns
        -------
        PropertyExchange
            The exchange in its final state.
        """
        logger.info(
            "Starting market scenario: %d participants, %d properties, %d rounds",
            self.num_participants,
            self.num_properties,
            self.rounds,
        )

        self.participants = list(self._identity_gen.generate_batch(self.num_participants))
        for participant in self.participants:
            self.exchange.credit(participant, self.starting_balance)

        for draft in self._property_gen.generate_batch(self.num_properties):
            self.exchange.add_property(
                REGISTRAR,
                owner=self.rng.choice(self.participants),
                property_class=draft.property_class,
                service_life=draft.service_life,
                address=draft.address,
            )

        actions = self._actions()
        for _ in range(self.rounds):
            self.clock.advance(self.rng.randint(0, 5))
            name, action = self.rng.choice(actions)
            try:
                if action():
                    self.outcomes[name] += 1
            except RegistryError as exc:
                self.rejections[type(exc).__name__] += 1
            self.exchange.check_invariants()
            if self.exchange.ledger.total() != self.credited_total:
                raise InvariantViolationError(
                    f"Ledger holds {self.exchange.ledger.total()}, {self.credited_total} was credited"
                )

        logger.info(
            "Market scenario complete: %d transitions, %d rejections",
            sum(self.outcomes.values()),
            sum(self.rejections.values()),
        )
        return self.exchange

    def get_outcomes(self) -> dict[str, int]:
        """Return committed transition counts by operation name."""
        return dict(self.outcomes)

    def _actions(self) -> list[tuple[str, Callable[[], bool]]]:
        return [
            ("create_sale", self._create_sale),
            ("fund_sale", self._fund_sale),
            ("confirm_sale", self._confirm_sale),
            ("cancel_sale", self._cancel_sale),
            ("expire_refund_sale", self._expire_refund_sale),
            ("create_gift", self._create_gift),
            ("confirm_gift", self._confirm_gift),
            ("cancel_gift", self._cancel_gift),
            ("create_deposit_offer", self._create_deposit_offer),
            ("pledge_deposit", self._pledge_deposit),
            ("confirm_deposit", self._confirm_deposit),
            ("cancel_deposit_offer", self._cancel_deposit_offer),
            ("repay_deposit", self._repay_deposit),
            ("foreclose_deposit", self._foreclose_deposit),
        ]

    # Callers are right most of the time; the rest exercise rejections.
    def _caller(self, expected: str) -> str:
        if self.rng.random() < 0.85:
            return expected
        return self.rng.choice(self.participants)

    def _price(self) -> int:
        return self.rng.randint(1, self.max_price)

    def _duration(self) -> int:
        return self.rng.randint(1, self.max_duration)

    def _random_property(self):
        return self.rng.choice(self.exchange.list_properties())

    def _pick(self, offers: list, statuses: set):
        candidates = [o for o in offers if o.status in statuses]
        return self.rng.choice(candidates) if candidates else None

    def _create_sale(self) -> bool:
        prop = self._random_property()
        self.exchange.create_sale(self._caller(prop.owner), prop.property_id, self._price(), self._duration())
        return True

    def _fund_sale(self) -> bool:
        offer = self._pick(self.exchange.list_sales(), {SaleStatus.OPEN})
        if offer is None:
            return False
        buyer = self.rng.choice(self.participants)
        amount = offer.price if self.rng.random() < 0.9 else offer.price - 1
        self.exchange.fund_sale(buyer, offer.offer_id, amount)
        return True

    def _confirm_sale(self) -> bool:
        offer = self._pick(self.exchange.list_sales(), {SaleStatus.OPEN, SaleStatus.FUNDED})
        if offer is None:
            return False
        self.exchange.confirm_sale(self._caller(offer.seller), offer.offer_id)
        return True

    def _cancel_sale(self) -> bool:
        offer = self._pick(self.exchange.list_sales(), {SaleStatus.FUNDED})
        if offer is None:
            return False
        self.exchange.cancel_sale(self._caller(offer.seller), offer.offer_id)
        return True

    def _expire_refund_sale(self) -> bool:
        offer = self._pick(self.exchange.list_sales(), {SaleStatus.OPEN, SaleStatus.FUNDED})
        if offer is None:
            return False
        self.exchange.expire_refund_sale(self.rng.choice(self.participants), offer.offer_id)
        return True

    def _create_gift(self) -> bool:
        prop = self._random_property()
        recipient = self.rng.choice(self.participants)
        self.exchange.create_gift(self._caller(prop.owner), prop.property_id, recipient)
        return True

    def _confirm_gift(self) -> bool:
        gift = self._pick(self.exchange.list_gifts(), {GiftStatus.PENDING})
        if gift is None:
            return False
        self.exchange.confirm_gift(self._caller(gift.recipient), gift.gift_id)
        return True

    def _cancel_gift(self) -> bool:
        gift = self._pick(self.exchange.list_gifts(), {GiftStatus.PENDING})
        if gift is None:
            return False
        self.exchange.cancel_gift(self._caller(gift.donor), gift.gift_id)
        return True

    def _create_deposit_offer(self) -> bool:
        prop = self._random_property()
        self.exchange.create_deposit_offer(
            self._caller(prop.owner), prop.property_id, self._price(), self._duration()
        )
        return True

    def _pledge_deposit(self) -> bool:
        offer = self._pick(self.exchange.list_deposits(), {DepositStatus.OFFERED})
        if offer is None:
            return False
        self.exchange.pledge_deposit(self.rng.choice(self.participants), offer.deposit_id, offer.amount)
        return True

    def _confirm_deposit(self) -> bool:
        offer = self._pick(self.exchange.list_deposits(), {DepositStatus.OFFERED, DepositStatus.PLEDGED})
        if offer is None:
            return False
        self.exchange.confirm_deposit(self._caller(offer.owner), offer.deposit_id)
        return True

    def _cancel_deposit_offer(self) -> bool:
        offer = self._pick(self.exchange.list_deposits(), {DepositStatus.OFFERED, DepositStatus.PLEDGED})
        if offer is None:
            return False
        self.exchange.cancel_deposit_offer(self._caller(offer.owner), offer.deposit_id)
        return True

    def _repay_deposit(self) -> bool:
        offer = self._pick(self.exchange.list_deposits(), {DepositStatus.ACTIVE})
        if offer is None:
            return False
        self.exchange.repay_deposit(self._caller(offer.owner), offer.deposit_id, offer.amount)
        return True

    def _foreclose_deposit(self) -> bool:
        offer = self._pick(self.exchange.list_deposits(), {DepositStatus.ACTIVE})
        if offer is None:
            return False
        self.exchange.foreclose_deposit(self.rng.choice(self.participants), offer.deposit_id)
        return True
