from decimal import Decimal

import pytest

from spendscan.domain.categories import Category
from spendscan.receipt.text_parser import (
    PriceFirstStrategy,
    QuantityPrefixedStrategy,
    SkuPrefixedStrategy,
    TrailingPriceStrategy,
    _extract_fallback_total,
    _extract_items,
)
from spendscan.receipt.text_parser.item_strategies import AnyPriceFallback


def _names_and_amounts(lines: list[str]) -> list[tuple[str, Decimal]]:
    return [(item.name, item.amount) for item in _extract_items(lines)]


def test_trailing_price_line() -> None:
    items = _extract_items(["Milk 2.50"])

    assert len(items) == 1
    assert items[0].name == "Milk"
    assert items[0].amount == Decimal("2.50")
    assert items[0].category is Category.GROCERIES
    assert items[0].placeholder is False


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("2 x Milk 5.00", ("Milk (2x)", Decimal("5.00"))),
        ("5.00 Milk", ("Milk", Decimal("5.00"))),
        ("123456 Milk 5.00", ("Milk", Decimal("5.00"))),
        ("Parking $5.00", ("Parking", Decimal("5.00"))),
        ("TV 1,299.00", ("Tv", Decimal("1299.00"))),
        ("Organic Bananas ... 1.99 F", ("Organic Bananas", Decimal("1.99"))),
    ],
)
def test_line_shapes(line: str, expected: tuple[str, Decimal]) -> None:
    assert _names_and_amounts([line]) == [expected]


def test_quantity_is_kept_on_item() -> None:
    (item,) = _extract_items(["3 x Eggs 6.00"])
    assert item.quantity == 3
    assert item.name == "Eggs (3x)"


@pytest.mark.parametrize("line", ["Laptop 10000.00", "Voucher 0.00", "Gift card 15000.00"])
def test_amount_bound_excludes_item(line: str) -> None:
    assert _extract_items([line]) == []


@pytest.mark.parametrize(
    "line",
    [
        "TOTAL 5.50",
        "Subtotal 5.50",
        "Sub Total 5.50",
        "Tax 0.40",
        "CASH 10.00",
        "Change 4.50",
        "VISA CARD 5.50",
        "Thank you 1.00",
        "01/15/2024 12.00",
        "12345-678",
        "***** 1.00 *****",
        "Tel: 555 1234 5.00",
        "www.store.com 1.00",
    ],
)
def test_denylisted_lines_are_skipped(line: str) -> None:
    assert _extract_items([line]) == []


def test_denylist_matches_whole_words_only() -> None:
    items = _extract_items(["Taxi 12.00"])
    assert [(item.name, item.category) for item in items] == [("Taxi", Category.TRANSPORT)]


def test_lines_without_prices_produce_no_items() -> None:
    assert _extract_items(["WALMART", "123 Main St", "Store #42"]) == []


@pytest.mark.parametrize("line", ["Table 12", "Invoice No 4521", "Store 5432", "Reg 3", "Parking $5"])
def test_whole_numbers_are_not_prices(line: str) -> None:
    assert _extract_items([line]) == []


def test_repeated_lines_are_separate_purchases() -> None:
    assert _names_and_amounts(["Milk 2.50", "Milk 2.50"]) == [
        ("Milk", Decimal("2.50")),
        ("Milk", Decimal("2.50")),
    ]


def test_each_line_yields_at_most_one_item() -> None:
    # Matches the SKU and trailing-price shapes; only the first wins
    assert _names_and_amounts(["0042 Bread 3.00"]) == [("Bread", Decimal("3.00"))]


def test_merchant_is_used_as_category_context() -> None:
    (item,) = _extract_items(["Paracetamol 3.20"], merchant="City Pharmacy")
    assert item.category is Category.HEALTH


def test_unicode_item_names_survive() -> None:
    (item,) = _extract_items(["दूध 45.00"])
    assert item.amount == Decimal("45.00")
    assert item.category is Category.OTHER


def test_strategies_return_candidates() -> None:
    assert QuantityPrefixedStrategy().attempt("2 x Milk 5.00").quantity == 2
    assert PriceFirstStrategy().attempt("5.00 Milk").name == "Milk"
    assert PriceFirstStrategy().attempt("5.00 Milk 2.50") is None
    assert SkuPrefixedStrategy().attempt("123 Milk 5.00") is None
    assert TrailingPriceStrategy().attempt("Milk 2.50").amount_text == "2.50"
    assert TrailingPriceStrategy().attempt("Milk") is None


def test_any_price_fallback_needs_text_before_price() -> None:
    fallback = AnyPriceFallback()
    assert fallback.attempt("1.99 each") is None
    assert fallback.attempt("Bananas 1.99 F").name == "Bananas "


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("TOTAL 12.34", Decimal("12.34")),
        ("Total: $12.34", Decimal("12.34")),
        ("Amount 8.00", Decimal("8.00")),
        ("Balance: 7.25", Decimal("7.25")),
        ("GRAND TOTAL 99.10", Decimal("99.10")),
        ("Final 3.00", Decimal("3.00")),
        ("TOTAL 0.00\nBalance 4.00", Decimal("4.00")),
        ("nothing here", Decimal("0.00")),
    ],
)
def test_extract_fallback_total(text: str, expected: Decimal) -> None:
    assert _extract_fallback_total(text) == expected
