"""Property record model."""

from dataclasses import dataclass

from estate_registry.models.enums import PropertyClass, PropertyState


@dataclass
class Property:
    """A registered property and the lifecycle currently holding it."""

    property_id: int
    owner: str
    property_class: PropertyClass
    service_life: int  # Accumulated ownership duration, in ticks
    created_at: int
    address: str = ""
    state: PropertyState = PropertyState.AVAILABLE

    @property
    def residential(self) -> bool:
        return self.property_class == PropertyClass.RESIDENTIAL

    @property
    def available(self) -> bool:
        return self.state == PropertyState.AVAILABLE

    @property
    def for_sale(self) -> bool:
        return self.state == PropertyState.FOR_SALE

    @property
    def under_deposit(self) -> bool:
        return self.state == PropertyState.UNDER_DEPOSIT

    @property
    def gifted(self) -> bool:
        return self.state == PropertyState.GIFTED
