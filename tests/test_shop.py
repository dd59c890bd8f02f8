"""Tests for aipuzzle.core.shop – pack prices and spend/purchase actions."""

from __future__ import annotations

import pytest

from aipuzzle.core.config import EconomyConfig
from aipuzzle.core.progress import InsufficientFundsError, ProgressTracker, TransactionType
from aipuzzle.core.shop import Pack, Shop, format_price, pack_price

RATES = {"RUB": 50.0, "USD": 1.0}
LABELS = {"RUB": "₽", "USD": "$"}


@pytest.fixture()
def tracker() -> ProgressTracker:
    return ProgressTracker()


@pytest.fixture()
def shop(tracker: ProgressTracker) -> Shop:
    return Shop(EconomyConfig(), tracker)


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------

class TestPackPrice:
    @pytest.mark.parametrize(
        "multiplier, expected",
        [(1, 50), (5, 250), (10, 500)],
    )
    def test_roubles_are_whole(self, multiplier: int, expected: int):
        price = pack_price(Pack(id=1, pzzls=1000, multiplier=multiplier), "RUB", RATES)
        assert price == expected
        assert isinstance(price, int)

    def test_roubles_are_floored(self):
        assert pack_price(Pack(id=1, pzzls=1, multiplier=1), "RUB", {"RUB": 49.99}) == 49

    def test_dollars_keep_two_decimals(self):
        assert pack_price(Pack(id=2, pzzls=5000, multiplier=5), "USD", RATES) == 5.0
        assert pack_price(Pack(id=1, pzzls=1, multiplier=1), "USD", {"USD": 0.333}) == 0.33

    def test_unknown_currency(self):
        with pytest.raises(ValueError):
            pack_price(Pack(id=1, pzzls=1000), "EUR", RATES)


class TestFormatPrice:
    def test_roubles(self):
        assert format_price(250, "RUB", LABELS) == "250 ₽"

    def test_dollars(self):
        assert format_price(5.0, "USD", LABELS) == "5.00 $"

    def test_unknown_label_falls_back_to_code(self):
        assert format_price(3, "EUR", LABELS) == "3 EUR"


# ---------------------------------------------------------------------------
# Shop actions
# ---------------------------------------------------------------------------

class TestShop:
    def test_default_packs(self, shop: Shop):
        assert [p.pzzls for p in shop.packs] == [1000, 5000, 10000]
        assert [p.popular for p in shop.packs] == [False, True, False]

    def test_currencies(self, shop: Shop):
        assert shop.currencies == ["RUB", "USD"]

    def test_price_label(self, shop: Shop):
        assert shop.price_label(shop.find_pack(3), "RUB") == "500 ₽"
        assert shop.price_label(shop.find_pack(1), "USD") == "1.00 $"

    def test_find_unknown_pack(self, shop: Shop):
        with pytest.raises(KeyError):
            shop.find_pack(42)

    def test_buy_pack_credits_balance(self, shop: Shop, tracker: ProgressTracker):
        tx = shop.buy_pack(2, "RUB")
        assert tracker.balance == 5000
        assert tx.type is TransactionType.PURCHASE
        assert tx.description == "Покупка пакета (250 ₽)"

    def test_buy_hint(self, shop: Shop, tracker: ProgressTracker):
        tracker.purchase(2500, "pack")
        tx = shop.buy_hint()
        assert tracker.balance == 0
        assert tx.description == "Покупка: Подсказка"

    def test_buy_skip_short(self, shop: Shop, tracker: ProgressTracker):
        tracker.purchase(4999, "pack")
        with pytest.raises(InsufficientFundsError):
            shop.buy_skip()
        assert tracker.balance == 4999

    def test_buy_discount(self, shop: Shop, tracker: ProgressTracker):
        tracker.purchase(100000, "pack")
        tx = shop.buy_discount()
        assert tx.amount == -100000
        assert tx.description == "Покупка: Скидка на подписку"
