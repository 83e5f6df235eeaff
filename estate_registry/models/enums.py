"""Enumeration types for registry entities."""

from enum import Enum


class PropertyClass(str, Enum):
    RESIDENTIAL = "RESIDENTIAL"
    NON_RESIDENTIAL = "NON_RESIDENTIAL"


class PropertyState(str, Enum):
    """Which lifecycle, if any, currently holds the property."""

    AVAILABLE = "AVAILABLE"
    FOR_SALE = "FOR_SALE"
    UNDER_DEPOSIT = "UNDER_DEPOSIT"
    GIFTED = "GIFTED"


class SaleStatus(str, Enum):
    OPEN = "OPEN"
    FUNDED = "FUNDED"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"


class GiftStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class DepositStatus(str, Enum):
    OFFERED = "OFFERED"
    PLEDGED = "PLEDGED"
    ACTIVE = "ACTIVE"
    REPAID = "REPAID"
    FORECLOSED = "FORECLOSED"
    CANCELLED = "CANCELLED"


TERMINAL_SALE_STATUSES = frozenset(
    {SaleStatus.CONFIRMED, SaleStatus.CANCELLED, SaleStatus.EXPIRED}
)
TERMINAL_GIFT_STATUSES = frozenset({GiftStatus.CONFIRMED, GiftStatus.CANCELLED})
TERMINAL_DEPOSIT_STATUSES = frozenset(
    {DepositStatus.REPAID, DepositStatus.FORECLOSED, DepositStatus.CANCELLED}
)
