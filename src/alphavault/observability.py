"""Prometheus metrics and observability helpers for the dashboard service."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Optional

from prometheus_client import Counter, Gauge, Histogram

from .config import get_settings

_REFRESH_DURATION = Histogram(
    "alphavault_refresh_duration_seconds",
    "Duration of a full fetch and derive cycle.",
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, 30),
)
_SNAPSHOT_TOKENS = Gauge(
    "alphavault_snapshot_tokens",
    "Number of tokens in the current snapshot.",
)
_REFRESH_ERRORS = Counter(
    "alphavault_refresh_errors_total",
    "Total number of failed refresh cycles.",
)
_REFRESH_SKIPPED = Counter(
    "alphavault_refresh_skipped_total",
    "Refresh ticks skipped because a refresh was still in flight.",
)
_PROVIDER_LATENCY = Histogram(
    "alphavault_provider_request_latency_seconds",
    "Latency of market data provider requests.",
    labelnames=("source",),
    buckets=(0.05, 0.1, 0.2, 0.3, 0.5, 0.75, 1.0, 1.5, 2.0, 3.0, 5.0, 10.0),
)
_QUOTES = Counter(
    "alphavault_swap_quotes_total",
    "Swap quote requests by outcome.",
    labelnames=("outcome",),
)


def _enabled(enabled: Optional[bool]) -> bool:
    """An explicit flag from the caller's settings wins over the process-wide default."""
    if enabled is None:
        return get_settings().metrics_enabled
    return enabled


def record_refresh(duration: float, tokens: int, enabled: Optional[bool] = None) -> None:
    if not _enabled(enabled):
        return
    _REFRESH_DURATION.observe(max(duration, 0.0))
    _SNAPSHOT_TOKENS.set(tokens)


def record_refresh_error(enabled: Optional[bool] = None) -> None:
    if _enabled(enabled):
        _REFRESH_ERRORS.inc()


def record_refresh_skipped(enabled: Optional[bool] = None) -> None:
    if _enabled(enabled):
        _REFRESH_SKIPPED.inc()


def record_quote(quoted: bool, enabled: Optional[bool] = None) -> None:
    if _enabled(enabled):
        _QUOTES.labels(outcome="quoted" if quoted else "no_quote").inc()


@contextmanager
def record_provider_latency(source: str, enabled: Optional[bool] = None):
    if not _enabled(enabled):
        yield
        return
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        _PROVIDER_LATENCY.labels(source=source).observe(max(elapsed, 0.0))
