"""Funds custody: value held against an offer until it is released."""

import copy
import logging
from dataclasses import dataclass
from decimal import Decimal

from estate_registry.custody.ledger import FundsLedger
from estate_registry.exceptions import CustodyError

logger = logging.getLogger(__name__)

# (lifecycle kind, offer id), e.g. ("sale", 3)
HoldKey = tuple[str, int]


@dataclass
class Hold:
    """Funds taken from ``payer`` and parked in escrow."""

    payer: str
    amount: Decimal


class FundsCustody:
    """Holds and releases value through an escrow identity on a ledger.

    Every hold is released at most once: to a recipient on completion or back
    to the payer on refund.
    """

    def __init__(self, ledger: FundsLedger, escrow_identity: str = "custody") -> None:
        self.ledger = ledger
        self.escrow_identity = escrow_identity
        self._holds: dict[HoldKey, Hold] = {}

    def hold(self, key: HoldKey, payer: str, amount: Decimal) -> Hold:
        """Take ``amount`` from ``payer`` and record it against ``key``."""
        if key in self._holds:
            raise CustodyError(f"Funds already held for {key[0]} {key[1]}")
        amount = Decimal(amount)
        self.ledger.transfer(payer, self.escrow_identity, amount)
        held = Hold(payer=payer, amount=amount)
        self._holds[key] = held
        logger.info("Holding %s from %s for %s %d", amount, payer, key[0], key[1])
        return held

    def release(self, key: HoldKey, recipient: str) -> Decimal:
        """Pay the funds held for ``key`` to ``recipient``."""
        held = self._holds.get(key)
        if held is None:
            raise CustodyError(f"No funds held for {key[0]} {key[1]}")
        self.ledger.transfer(self.escrow_identity, recipient, held.amount)
        del self._holds[key]
        logger.info("Released %s for %s %d to %s", held.amount, key[0], key[1], recipient)
        return held.amount

    def refund(self, key: HoldKey) -> Decimal:
        """Return the funds held for ``key`` to whoever paid them."""
        held = self._holds.get(key)
        if held is None:
            raise CustodyError(f"No funds held for {key[0]} {key[1]}")
        return self.release(key, held.payer)

    def pay(self, payer: str, payee: str, amount: Decimal) -> None:
        """Move value directly between two identities, bypassing escrow."""
        self.ledger.transfer(payer, payee, Decimal(amount))
        logger.info("Paid %s from %s to %s", amount, payer, payee)

    def held(self, key: HoldKey) -> Decimal:
        held = self._holds.get(key)
        return held.amount if held else Decimal("0")

    def is_holding(self, key: HoldKey) -> bool:
        return key in self._holds

    def total_held(self) -> Decimal:
        return sum((h.amount for h in self._holds.values()), Decimal("0"))

    def snapshot(self) -> dict:
        return {"holds": copy.deepcopy(self._holds), "ledger": self.ledger.snapshot()}

    def restore(self, snapshot: dict) -> None:
        self._holds = snapshot["holds"]
        self.ledger.restore(snapshot["ledger"])
