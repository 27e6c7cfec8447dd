"""Central rate limit policies."""

from __future__ import annotations

from dataclasses import dataclass

from config import get_settings


@dataclass(frozen=True)
class Policy:
    """Fixed window rate limit configuration."""

    limit: int
    window_secs: int


def order_create() -> Policy:
    """Limit order placement attempts per client."""
    settings = get_settings()
    return Policy(limit=settings.order_rate_limit, window_secs=settings.order_rate_window_secs)


__all__ = ["Policy", "order_create"]
