"""Identity generator for market participants."""

from __future__ import annotations

from typing import Iterator

from estate_registry.generators.base import BaseGenerator


class IdentityGenerator(BaseGenerator):
    """Generate unique participant identities.

    Identities look like ``<user_name>-<4 hex>`` and never repeat within one
    generator.
    """

    def generate(self) -> str:
        return f"{self.fake.unique.user_name()}-{self.fake.hexify('^^^^')}"

    def generate_batch(self, count: int) -> Iterator[str]:
        """Generate multiple identities.

        Parameters
        ----------
        count : int
            Number of identities to generate.

        Yields
        ------
        str
            Generated identities.
        """
        for _ in range(count):
            yield self.generate()
