"""Tests for PropertyRegistry and OfferStore."""

from decimal import Decimal

import pytest

from estate_registry.exceptions import (
    InvalidArgumentError,
    InvalidReferenceError,
    NotAvailableError,
    UnauthorizedError,
)
from estate_registry.models import (
    DepositOffer,
    GiftOffer,
    PropertyClass,
    PropertyState,
    SaleOffer,
    SaleStatus,
)
from estate_registry.store import OfferStore, PropertyRegistry


@pytest.fixture
def registry() -> PropertyRegistry:
    """Create a fresh registry for each test."""
    return PropertyRegistry(administrators=frozenset({"registrar"}))


@pytest.fixture
def offers() -> OfferStore:
    return OfferStore()


def _sale(offer_id: int, property_id: int = 0) -> SaleOffer:
    return SaleOffer(
        offer_id=offer_id,
        property_id=property_id,
        seller="alice",
        price=Decimal("500"),
        created_at=0,
        expires_at=100,
        service_life_snapshot=1000,
    )


class TestPropertyRegistryAdd:
    """Tests for property registration."""

    def test_add_property(self, registry: PropertyRegistry) -> None:
        prop = registry.add("registrar", "alice", PropertyClass.RESIDENTIAL, 1000, now=5, address="1 Main St")

        assert prop.property_id == 0
        assert prop.owner == "alice"
        assert prop.service_life == 1000
        assert prop.created_at == 5
        assert prop.address == "1 Main St"
        assert prop.state == PropertyState.AVAILABLE
        assert registry.get(0) is prop

    def test_ids_are_sequential(self, registry: PropertyRegistry) -> None:
        ids = [registry.add("registrar", "alice", PropertyClass.RESIDENTIAL, 0, now=0).property_id for _ in range(3)]

        assert ids == [0, 1, 2]
        assert len(registry.list_properties()) == 3

    def test_accepts_class_value_string(self, registry: PropertyRegistry) -> None:
        prop = registry.add("registrar", "alice", "NON_RESIDENTIAL", 0, now=0)

        assert prop.property_class == PropertyClass.NON_RESIDENTIAL

    def test_escrow_cannot_hold_property(self) -> None:
        registry = PropertyRegistry(administrators=frozenset({"registrar"}), escrow_identity="custody")
        prop = registry.add("registrar", "alice", PropertyClass.RESIDENTIAL, 0, now=0)

        with pytest.raises(InvalidArgumentError):
            registry.add("registrar", "custody", PropertyClass.RESIDENTIAL, 0, now=0)
        with pytest.raises(InvalidArgumentError):
            registry.transfer(prop, "custody")
        assert prop.owner == "alice"
        assert registry.get_owner_properties("custody") == []

    def test_non_admin_rejected(self, registry: PropertyRegistry) -> None:
        with pytest.raises(UnauthorizedError, match="administrator"):
            registry.add("alice", "alice", PropertyClass.RESIDENTIAL, 0, now=0)
        assert registry.properties == {}

    def test_null_owner_rejected(self, registry: PropertyRegistry) -> None:
        with pytest.raises(InvalidArgumentError):
            registry.add("registrar", "", PropertyClass.RESIDENTIAL, 0, now=0)

    def test_negative_service_life_rejected(self, registry: PropertyRegistry) -> None:
        with pytest.raises(InvalidArgumentError):
            registry.add("registrar", "alice", PropertyClass.RESIDENTIAL, -1, now=0)

    def test_get_missing_property(self, registry: PropertyRegistry) -> None:
        with pytest.raises(InvalidReferenceError, match="Property 9 not found"):
            registry.get(9)


class TestPropertyRegistryLifecycle:
    """Tests for lifecycle claims and ownership transfer."""

    def test_open_and_close_lifecycle(self, registry: PropertyRegistry) -> None:
        prop = registry.add("registrar", "alice", PropertyClass.RESIDENTIAL, 0, now=0)

        registry.open_lifecycle(prop, PropertyState.FOR_SALE)
        assert prop.for_sale

        registry.close_lifecycle(prop, PropertyState.FOR_SALE)
        assert prop.available

    def test_open_on_claimed_property_fails(self, registry: PropertyRegistry) -> None:
        prop = registry.add("registrar", "alice", PropertyClass.RESIDENTIAL, 0, now=0)
        registry.open_lifecycle(prop, PropertyState.GIFTED)

        with pytest.raises(NotAvailableError):
            registry.open_lifecycle(prop, PropertyState.UNDER_DEPOSIT)
        assert prop.gifted

    def test_open_with_available_state_rejected(self, registry: PropertyRegistry) -> None:
        prop = registry.add("registrar", "alice", PropertyClass.RESIDENTIAL, 0, now=0)

        with pytest.raises(InvalidArgumentError):
            registry.open_lifecycle(prop, PropertyState.AVAILABLE)

    def test_close_wrong_lifecycle_fails(self, registry: PropertyRegistry) -> None:
        prop = registry.add("registrar", "alice", PropertyClass.RESIDENTIAL, 0, now=0)
        registry.open_lifecycle(prop, PropertyState.FOR_SALE)

        with pytest.raises(NotAvailableError):
            registry.close_lifecycle(prop, PropertyState.GIFTED)
        assert prop.for_sale

    def test_require_owner(self, registry: PropertyRegistry) -> None:
        prop = registry.add("registrar", "alice", PropertyClass.RESIDENTIAL, 0, now=0)

        registry.require_owner(prop, "alice")
        with pytest.raises(UnauthorizedError):
            registry.require_owner(prop, "bob")

    def test_transfer_updates_owner_index(self, registry: PropertyRegistry) -> None:
        prop = registry.add("registrar", "alice", PropertyClass.RESIDENTIAL, 0, now=0)

        registry.transfer(prop, "bob")

        assert prop.owner == "bob"
        assert registry.get_owner_properties("alice") == []
        assert registry.get_owner_properties("bob") == [prop]

    def test_snapshot_restore_keeps_handles(self, registry: PropertyRegistry) -> None:
        prop = registry.add("registrar", "alice", PropertyClass.RESIDENTIAL, 0, now=0)
        snapshot = registry.snapshot()

        registry.open_lifecycle(prop, PropertyState.FOR_SALE)
        registry.transfer(prop, "bob")
        registry.add("registrar", "carol", PropertyClass.RESIDENTIAL, 0, now=0)
        registry.restore(snapshot)

        assert registry.get(0) is prop
        assert prop.owner == "alice"
        assert prop.available
        assert len(registry.properties) == 1
        assert registry.get_owner_properties("bob") == []

    def test_summary(self, registry: PropertyRegistry) -> None:
        prop = registry.add("registrar", "alice", PropertyClass.RESIDENTIAL, 0, now=0)
        registry.add("registrar", "alice", PropertyClass.RESIDENTIAL, 0, now=0)
        registry.open_lifecycle(prop, PropertyState.UNDER_DEPOSIT)

        summary = registry.summary()

        assert summary["properties"] == 2
        assert summary["available"] == 1
        assert summary["under_deposit"] == 1
        assert summary["for_sale"] == 0


class TestOfferStore:
    """Tests for OfferStore."""

    def test_add_and_get_sale(self, offers: OfferStore) -> None:
        offer = _sale(offers.next_sale_id)
        offers.add_sale(offer)

        assert offers.get_sale(0) is offer
        assert offers.next_sale_id == 1

    def test_out_of_sequence_rejected(self, offers: OfferStore) -> None:
        with pytest.raises(InvalidArgumentError, match="out of sequence"):
            offers.add_sale(_sale(5))

    def test_missing_offers(self, offers: OfferStore) -> None:
        with pytest.raises(InvalidReferenceError, match="Sale offer 0"):
            offers.get_sale(0)
        with pytest.raises(InvalidReferenceError, match="Gift offer 0"):
            offers.get_gift(0)
        with pytest.raises(InvalidReferenceError, match="Deposit offer 0"):
            offers.get_deposit(0)

    def test_property_index(self, offers: OfferStore) -> None:
        offers.add_sale(_sale(0, property_id=1))
        offers.add_sale(_sale(1, property_id=2))
        offers.add_sale(_sale(2, property_id=1))
        offers.add_gift(GiftOffer(gift_id=0, property_id=1, donor="a", recipient="b", created_at=0))
        offers.add_deposit(
            DepositOffer(deposit_id=0, property_id=2, owner="a", amount=Decimal("1"), duration=1, created_at=0)
        )

        assert [o.offer_id for o in offers.get_property_sales(1)] == [0, 2]
        assert len(offers.get_property_gifts(1)) == 1
        assert offers.get_property_gifts(2) == []
        assert len(offers.get_property_deposits(2)) == 1
        assert offers.summary() == {"sales": 3, "gifts": 1, "deposits": 1}

    def test_snapshot_restore(self, offers: OfferStore) -> None:
        offer = _sale(0)
        offers.add_sale(offer)
        snapshot = offers.snapshot()

        offer.buyer = "bob"
        offer.status = SaleStatus.FUNDED
        offers.add_sale(_sale(1))
        offers.restore(snapshot)

        assert offers.get_sale(0) is offer
        assert offer.buyer is None
        assert offer.status == SaleStatus.OPEN
        assert offers.next_sale_id == 1
        assert offers.get_property_sales(0) == [offer]
