"""Tests for custom exception hierarchy."""

import pytest

from estate_registry.exceptions import (
    AlreadyAssignedError,
    AlreadyConfirmedError,
    AlreadyFundedError,
    AlreadyPledgedError,
    ConfigurationError,
    CustodyError,
    InsufficientFundsError,
    InvalidArgumentError,
    InvalidReferenceError,
    InvariantViolationError,
    NoBuyerError,
    NoPledgeeError,
    NotActiveError,
    NotAvailableError,
    NotYetAssignedError,
    NotYetDueError,
    NotYetExpiredError,
    OfferClosedError,
    OfferExpiredError,
    OfferStateError,
    RegistryError,
    SinkError,
    TransferFailedError,
    UnauthorizedError,
    WindowClosedError,
    WindowOpenError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_registry_error_is_exception(self) -> None:
        assert isinstance(RegistryError("test"), Exception)

    @pytest.mark.parametrize(
        "exc_type",
        [
            UnauthorizedError,
            NotAvailableError,
            InvalidReferenceError,
            AlreadyAssignedError,
            NotYetAssignedError,
            InsufficientFundsError,
            WindowClosedError,
            WindowOpenError,
            InvalidArgumentError,
            OfferStateError,
            CustodyError,
            ConfigurationError,
            SinkError,
            InvariantViolationError,
        ],
    )
    def test_taxonomy_roots_are_registry_errors(self, exc_type: type) -> None:
        assert isinstance(exc_type("test"), RegistryError)

    def test_counterparty_slot_errors(self) -> None:
        assert isinstance(AlreadyFundedError("x"), AlreadyAssignedError)
        assert isinstance(AlreadyPledgedError("x"), AlreadyAssignedError)
        assert isinstance(NoBuyerError("x"), NotYetAssignedError)
        assert isinstance(NoPledgeeError("x"), NotYetAssignedError)

    def test_window_errors(self) -> None:
        assert isinstance(OfferExpiredError("x"), WindowClosedError)
        assert isinstance(NotYetExpiredError("x"), WindowOpenError)
        assert isinstance(NotYetDueError("x"), WindowOpenError)

    def test_offer_state_errors(self) -> None:
        assert isinstance(AlreadyConfirmedError("x"), OfferStateError)
        assert isinstance(NotActiveError("x"), OfferStateError)
        assert isinstance(OfferClosedError("x"), OfferStateError)

    def test_transfer_failed_is_custody_error(self) -> None:
        assert isinstance(TransferFailedError("x"), CustodyError)

    def test_exception_message(self) -> None:
        err = InvalidReferenceError("Sale offer 7 not found")
        assert str(err) == "Sale offer 7 not found"
