"""Deterministic radio play metrics.

Maps a station's listener base and a random draw in [0, 1) to the listener
count and the hype / streams / sales deltas of one airing. Pure: the random
draw is always supplied by the caller.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from radio_settlement.config import RADIO_METRICS


@dataclass(frozen=True, slots=True)
class PlayMetrics:
    listeners: int
    hype_gained: int
    streams_boost: int
    sales_boost: int


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def calculate_play_metrics(listener_base: int, draw: float) -> PlayMetrics:
    """Compute metrics for a single play.

    Args:
        listener_base: station listener base
        draw: random value in [0, 1)
    Returns:
        PlayMetrics with every field at or above its configured floor.
    """
    if not 0.0 <= draw < 1.0:
        raise ValueError(f"Random draw must be in [0, 1), got {draw}")
    cfg = RADIO_METRICS
    multiplier = float(cfg["multiplier_base"]) + draw * float(cfg["multiplier_spread"])
    listeners = max(int(cfg["min_listeners"]), round_half_up(listener_base * multiplier))
    return PlayMetrics(
        listeners=listeners,
        hype_gained=max(int(cfg["min_hype"]), round_half_up(listeners * float(cfg["hype_ratio"]))),
        streams_boost=max(int(cfg["min_streams"]), round_half_up(listeners * float(cfg["streams_ratio"]))),
        sales_boost=max(int(cfg["min_sales"]), round_half_up(listeners * float(cfg["sales_ratio"]))),
    )


__all__ = ["PlayMetrics", "calculate_play_metrics", "round_half_up"]
