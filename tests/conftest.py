"""Pytest configuration and fixtures."""

from decimal import Decimal

import pytest

from estate_registry.clock import LogicalClock
from estate_registry.config import RegistryConfig
from estate_registry.custody import InMemoryLedger
from estate_registry.exceptions import TransferFailedError
from estate_registry.exchange import PropertyExchange
from estate_registry.models import Property, PropertyClass


class FailingLedger(InMemoryLedger):
    """Ledger whose transfers to selected identities always fail."""

    def __init__(self) -> None:
        super().__init__()
        self.blocked: set[str] = set()

    def transfer(self, source: str, destination: str, amount: Decimal) -> None:
        if destination in self.blocked:
            raise TransferFailedError(f"Transfers to {destination} are blocked")
        super().transfer(source, destination, amount)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def admin() -> str:
    return "registrar"


@pytest.fixture
def owner() -> str:
    return "alice"


@pytest.fixture
def buyer() -> str:
    return "bob"


@pytest.fixture
def other() -> str:
    return "carol"


@pytest.fixture
def clock() -> LogicalClock:
    """Clock starting at t=1000."""
    return LogicalClock(start=1000)


@pytest.fixture
def ledger() -> FailingLedger:
    return FailingLedger()


@pytest.fixture
def exchange(
    admin: str, owner: str, buyer: str, other: str, clock: LogicalClock, ledger: FailingLedger
) -> PropertyExchange:
    """Exchange where every participant starts with 10000."""
    ex = PropertyExchange(
        RegistryConfig(administrators=frozenset({admin})),
        clock=clock,
        ledger=ledger,
    )
    for identity in (owner, buyer, other):
        ex.credit(identity, 10_000)
    return ex


@pytest.fixture
def prop(exchange: PropertyExchange, admin: str, owner: str) -> Property:
    """Residential property owned by ``owner`` with service life 1000."""
    return exchange.add_property(admin, owner, PropertyClass.RESIDENTIAL, service_life=1000)
