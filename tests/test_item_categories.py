"""Tests for receipt item category matching."""

from pathlib import Path

import pytest

from spendscan.domain.categories import Category, resolve_category
from spendscan.receipt.item_categories import (
    build_item_category_rule_layers,
    categorize,
    categorize_debug,
)
from spendscan.runtime.item_category_rules import load_item_category_rule_layers


@pytest.mark.parametrize(
    ("item", "expected"),
    [
        ("Whole Milk", Category.GROCERIES),
        ("Organic Bananas", Category.GROCERIES),
        ("Coffee", Category.DINING),
        ("Uber trip", Category.TRANSPORT),
        ("Parking", Category.TRANSPORT),
        ("Running shoes", Category.SHOPPING),
        ("Vitamin D", Category.HEALTH),
        ("Netflix subscription", Category.ENTERTAINMENT),
        ("Electric bill", Category.UTILITIES),
        ("Zzzz", Category.OTHER),
        ("", Category.OTHER),
    ],
)
def test_categorize_examples(item: str, expected: Category) -> None:
    assert categorize(item) is expected


def test_merchant_text_counts_toward_score() -> None:
    assert categorize("Paracetamol", "City Pharmacy") is Category.HEALTH


def test_general_retailer_name_does_not_override_item() -> None:
    assert categorize("Milk", "WALMART") is Category.GROCERIES
    assert categorize("Bread", "Costco Wholesale") is Category.GROCERIES


def test_short_keywords_match_whole_words_only() -> None:
    # "tea" must not fire inside "steak"
    assert categorize("Steak") is Category.OTHER
    assert categorize("Green tea") is Category.DINING


def test_ties_go_to_earlier_category() -> None:
    # "gas" is both a Transport and a Utilities keyword
    assert categorize("Gas") is Category.TRANSPORT


def test_longer_keywords_outweigh_shorter_ones() -> None:
    ranked = categorize_debug("Chicken sandwich")
    assert ranked[0] == (Category.DINING, len("sandwich"))
    assert ranked[1] == (Category.GROCERIES, len("chicken"))
    assert categorize("Chicken sandwich") is Category.DINING


def test_repeated_keywords_add_up() -> None:
    ranked = dict(categorize_debug("milk milk"))
    assert ranked[Category.GROCERIES] == 8


def test_rule_layers_extend_keywords() -> None:
    layers = build_item_category_rule_layers(
        [
            {
                "rules": [
                    {"category": "Groceries", "keywords": ["Paneer", "atta"]},
                    {"category": "Food", "keywords": "thali"},
                    {"category": "NotACategory", "keywords": ["zzzz"]},
                ]
            }
        ]
    )

    assert categorize("Paneer", rule_layers=layers) is Category.GROCERIES
    assert categorize("Veg thali", rule_layers=layers) is Category.DINING
    assert categorize("Zzzz", rule_layers=layers) is Category.OTHER
    # Built-in keywords are still there
    assert categorize("Milk", rule_layers=layers) is Category.GROCERIES


def test_load_rule_layers_from_toml(tmp_path: Path) -> None:
    rules = tmp_path / "item_categories.toml"
    rules.write_text('[[rules]]\ncategory = "Health"\nkeywords = ["ayurvedic"]\n', encoding="utf-8")

    layers = load_item_category_rule_layers((str(rules),))

    assert categorize("Ayurvedic balm", rule_layers=layers) is Category.HEALTH


def test_missing_toml_file_keeps_builtin_rules(tmp_path: Path) -> None:
    layers = load_item_category_rule_layers((str(tmp_path / "missing.toml"),))
    assert categorize("Milk", rule_layers=layers) is Category.GROCERIES


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Groceries", Category.GROCERIES),
        ("dining", Category.DINING),
        ("Food", Category.DINING),
        ("Transportation", Category.TRANSPORT),
        ("Healthcare", Category.HEALTH),
        ("Rent", Category.UTILITIES),
        ("", Category.OTHER),
        ("Mystery", Category.OTHER),
    ],
)
def test_resolve_category_accepts_legacy_names(name: str, expected: Category) -> None:
    assert resolve_category(name) is expected
