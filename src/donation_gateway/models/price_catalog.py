from types import MappingProxyType
from typing import Mapping


class PriceCatalog:
    """
    Fixed donation tiers (in cents) mapped to recurring Stripe price ids.

    Built once at startup and never mutated. Tiers whose price id is blank
    are treated as not offered.
    """

    def __init__(self, prices: Mapping[int, str]):
        self._prices = MappingProxyType(
            {int(amount): price_id for amount, price_id in prices.items() if price_id}
        )

    @classmethod
    def from_settings(cls, settings) -> "PriceCatalog":
        return cls(settings.price_ids)

    def price_for(self, amount) -> str | None:
        """Price id for an exact tier; anything that is not a whole number of cents has none."""
        if isinstance(amount, bool):
            return None
        if isinstance(amount, float) and amount.is_integer():
            amount = int(amount)
        elif isinstance(amount, str) and amount.isdigit():
            amount = int(amount)
        if not isinstance(amount, int):
            return None
        return self._prices.get(amount)

    @property
    def amounts(self) -> list[int]:
        return sorted(self._prices)

    def __contains__(self, amount) -> bool:
        return self.price_for(amount) is not None

    def __len__(self) -> int:
        return len(self._prices)
