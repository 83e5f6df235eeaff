"""Balance ledgers that custody moves value through."""

import copy
import logging
from decimal import Decimal
from typing import Protocol

from estate_registry.exceptions import InvalidArgumentError, TransferFailedError
from estate_registry.models import require_identity

logger = logging.getLogger(__name__)


class FundsLedger(Protocol):
    """Moves value between identities, raising on failure."""

    def balance_of(self, identity: str) -> Decimal: ...

    def transfer(self, source: str, destination: str, amount: Decimal) -> None: ...

    def snapshot(self) -> dict: ...

    def restore(self, snapshot: dict) -> None: ...


class InMemoryLedger:
    """Per-identity balances held in memory."""

    def __init__(self) -> None:
        self._balances: dict[str, Decimal] = {}

    def credit(self, identity: str, amount: Decimal) -> Decimal:
        """Bring external value into the ledger for an identity."""
        require_identity("identity", identity)
        amount = Decimal(amount)
        if amount <= 0:
            raise InvalidArgumentError("Credit amount must be positive")
        self._balances[identity] = self.balance_of(identity) + amount
        return self._balances[identity]

    def balance_of(self, identity: str) -> Decimal:
        return self._balances.get(identity, Decimal("0"))

    def transfer(self, source: str, destination: str, amount: Decimal) -> None:
        """Move ``amount`` from ``source`` to ``destination``."""
        amount = Decimal(amount)
        if amount <= 0:
            raise TransferFailedError(f"Transfer amount must be positive, got {amount}")
        available = self.balance_of(source)
        if available < amount:
            raise TransferFailedError(
                f"{source} cannot transfer {amount}: balance is {available}"
            )
        self._balances[source] = available - amount
        self._balances[destination] = self.balance_of(destination) + amount
        logger.debug("Transferred %s from %s to %s", amount, source, destination)

    def total(self) -> Decimal:
        """Total value across every identity, escrow included."""
        return sum(self._balances.values(), Decimal("0"))

    def balances(self) -> dict[str, Decimal]:
        return dict(self._balances)

    def snapshot(self) -> dict:
        return {"balances": copy.deepcopy(self._balances)}

    def restore(self, snapshot: dict) -> None:
        self._balances = snapshot["balances"]
