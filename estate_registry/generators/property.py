"""Property generator for registry simulations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from estate_registry.generators.base import BaseGenerator
from estate_registry.models import PropertyClass


@dataclass
class PropertyDraft:
    """Attributes of a property that is about to be registered."""

    property_class: PropertyClass
    service_life: int
    address: str


class PropertyGenerator(BaseGenerator):
    """Generate synthetic property attributes."""

    # Service life ranges by class, in ticks
    SERVICE_LIFE_RANGES = {
        PropertyClass.RESIDENTIAL: (0, 5_000),
        PropertyClass.NON_RESIDENTIAL: (0, 20_000),
    }

    def __init__(
        self,
        seed: int | None = None,
        residential_rate: float = 0.7,
        locale: str = "en_US",
    ) -> None:
        super().__init__(seed, locale)
        if not 0.0 <= residential_rate <= 1.0:
            raise ValueError("residential_rate must be between 0 and 1")
        self.residential_rate = residential_rate

    def generate(self) -> PropertyDraft:
        if self.rng.random() < self.residential_rate:
            property_class = PropertyClass.RESIDENTIAL
        else:
            property_class = PropertyClass.NON_RESIDENTIAL
        low, high = self.SERVICE_LIFE_RANGES[property_class]
        return PropertyDraft(
            property_class=property_class,
            service_life=self.rng.randint(low, high),
            address=self.fake.address().replace("\n", ", "),
        )

    def generate_batch(self, count: int) -> Iterator[PropertyDraft]:
        for _ in range(count):
            yield self.generate()
