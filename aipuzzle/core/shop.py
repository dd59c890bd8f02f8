"""PZZLS shop: pack pricing per display currency and the spend/purchase actions."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Union

from aipuzzle.core.progress import ProgressTracker, Transaction

if TYPE_CHECKING:
    from aipuzzle.core.config import EconomyConfig

logger = logging.getLogger(__name__)

Price = Union[int, float]


@dataclass(frozen=True)
class Pack:
    """A PZZLS bundle. ``multiplier`` scales the per-1000 currency rate."""

    id: int
    pzzls: int
    multiplier: float = 1
    popular: bool = False


def pack_price(pack: Pack, currency: str, rates: Mapping[str, float]) -> Price:
    """Price of a pack in a display currency.

    Roubles are shown as whole units (floored), every other currency with two decimals.
    """
    if currency not in rates:
        raise ValueError(f"Unknown currency: {currency}")
    value = rates[currency] * pack.multiplier
    if currency == "RUB":
        return int(math.floor(value))
    return round(value, 2)


def format_price(price: Price, currency: str, labels: Mapping[str, str]) -> str:
    label = labels.get(currency, currency)
    if isinstance(price, int):
        return f"{price} {label}"
    return f"{price:.2f} {label}"


class Shop:
    """Spend and purchase actions against a ``ProgressTracker``."""

    def __init__(self, economy: "EconomyConfig", tracker: ProgressTracker) -> None:
        self._economy = economy
        self._tracker = tracker

    @property
    def economy(self) -> "EconomyConfig":
        return self._economy

    @property
    def packs(self):
        return self._economy.packs

    @property
    def currencies(self):
        return list(self._economy.rates)

    def price_of(self, pack: Pack, currency: str) -> Price:
        return pack_price(pack, currency, self._economy.rates)

    def price_label(self, pack: Pack, currency: str) -> str:
        return format_price(self.price_of(pack, currency), currency, self._economy.currency_labels)

    def find_pack(self, pack_id: int) -> Pack:
        for pack in self._economy.packs:
            if pack.id == pack_id:
                return pack
        raise KeyError(f"No pack with id {pack_id}")

    def buy_pack(self, pack_id: int, currency: str) -> Transaction:
        """Credit a pack once its (simulated) payment has gone through."""
        pack = self.find_pack(pack_id)
        label = self.price_label(pack, currency)
        tx = self._tracker.purchase(pack.pzzls, f"Покупка пакета ({label})")
        logger.info("Purchased %d PZZLS for %s", pack.pzzls, label)
        return tx

    def buy_hint(self) -> Transaction:
        return self._tracker.spend(self._economy.cost_hint, "Покупка: Подсказка")

    def buy_skip(self) -> Transaction:
        return self._tracker.spend(self._economy.cost_skip, "Покупка: Пропуск уровня")

    def buy_discount(self) -> Transaction:
        return self._tracker.spend(self._economy.cost_discount, "Покупка: Скидка на подписку")
