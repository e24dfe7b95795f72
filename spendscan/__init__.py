"""Receipt-to-expense extraction and recurring wastage detection."""

__version__ = "0.1.0"
