"""Custom exception hierarchy for estate-registry."""


class RegistryError(Exception):
    """Base exception for all estate-registry errors."""


class UnauthorizedError(RegistryError):
    """Raised when the caller is not the identity the operation requires."""


class NotAvailableError(RegistryError):
    """Raised when a property already has a conflicting lifecycle open."""


class InvalidReferenceError(RegistryError):
    """Raised when a referenced property or offer does not exist."""


class AlreadyAssignedError(RegistryError):
    """Raised when a counterparty slot is already filled."""


class AlreadyFundedError(AlreadyAssignedError):
    """Raised when a sale offer already has a buyer."""


class AlreadyPledgedError(AlreadyAssignedError):
    """Raised when a deposit offer already has a pledgee."""


class NotYetAssignedError(RegistryError):
    """Raised when a counterparty slot is still empty."""


class NoBuyerError(NotYetAssignedError):
    """Raised when a sale offer has not been funded."""


class NoPledgeeError(NotYetAssignedError):
    """Raised when a deposit offer has not been pledged."""


class InsufficientFundsError(RegistryError):
    """Raised when the supplied value is below the required amount."""


class WindowClosedError(RegistryError):
    """Raised when a time-bounded operation is invoked after its window."""


class OfferExpiredError(WindowClosedError):
    """Raised when funding a sale offer after its expiry."""


class WindowOpenError(RegistryError):
    """Raised when a time-triggered operation is invoked too early."""


class NotYetExpiredError(WindowOpenError):
    """Raised when refunding a sale offer that has not expired."""


class NotYetDueError(WindowOpenError):
    """Raised when foreclosing a deposit before its term ends."""


class InvalidArgumentError(RegistryError):
    """Raised when an argument is malformed (e.g. a null identity)."""


class OfferStateError(RegistryError):
    """Raised when an offer is in an invalid state for the operation."""


class AlreadyConfirmedError(OfferStateError):
    """Raised when cancelling a deposit offer that was already confirmed."""


class NotActiveError(OfferStateError):
    """Raised when a deposit is not currently in force."""


class OfferClosedError(OfferStateError):
    """Raised when an offer has reached a terminal state."""


class CustodyError(RegistryError):
    """Raised when custody cannot hold or release funds."""


class TransferFailedError(CustodyError):
    """Raised when a ledger transfer between identities fails."""


class ConfigurationError(RegistryError):
    """Raised when configuration is invalid or missing."""


class SinkError(RegistryError):
    """Raised when a sink operation fails."""


class InvariantViolationError(RegistryError):
    """Raised when registry, offer and custody state disagree."""
