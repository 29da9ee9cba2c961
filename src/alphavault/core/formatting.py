"""Compact number and price formatting for console output."""
from __future__ import annotations

_SUFFIXES = ((1e9, "B"), (1e6, "M"), (1e3, "K"))


def format_number(num: float, decimals: int = 2) -> str:
    for scale, suffix in _SUFFIXES:
        if num >= scale:
            return f"{num / scale:.{decimals}f}{suffix}"
    return f"{num:.{decimals}f}"


def format_price(price: float) -> str:
    if price < 0.01:
        return f"${price:.6f}"
    if price < 1:
        return f"${price:.4f}"
    return f"${price:.2f}"


def format_change(change: float) -> str:
    arrow = "+" if change > 0 else "-"
    return f"{arrow}{abs(change):.2f}%"
