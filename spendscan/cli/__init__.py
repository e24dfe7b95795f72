"""Unified command-line interface for spendscan.

Usage:
    spendscan parse <file|->
    spendscan parse receipt.txt --json
    spendscan scan <image> [--ocr-url URL]
    spendscan wastage <history.csv|history.json> [--period-days N]
    spendscan serve [--host] [--port]
"""
