"""Runtime loader for receipt item categorization rules."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from spendscan.receipt.item_categories import ItemCategoryRuleLayers, build_item_category_rule_layers
from spendscan.runtime.logging import get_logger
from spendscan.runtime.settings import get_settings

logger = get_logger(__name__)


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    if not path.exists():
        logger.warning("Category rules file not found: %s", path)
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    return data if isinstance(data, dict) else {}


@lru_cache(maxsize=8)
def load_item_category_rule_layers(classifier_paths: tuple[str, ...] | None = None) -> ItemCategoryRuleLayers:
    """Load built-in keywords plus any TOML rule files into in-memory layers.

    With no explicit paths, the file named by ``SPENDSCAN_CATEGORY_RULES`` is
    used when set. A rule file looks like::

        [[rules]]
        category = "Groceries"
        keywords = ["paneer", "atta"]
    """
    if classifier_paths is None:
        configured = get_settings().category_rules_path
        classifier_files = [configured] if configured is not None else []
    else:
        classifier_files = [Path(path) for path in classifier_paths]

    classifier_configs = tuple(_load_toml(path) for path in classifier_files)
    return build_item_category_rule_layers(classifier_configs)
