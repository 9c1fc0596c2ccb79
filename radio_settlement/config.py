"""Core application configuration & tunable settlement rules.

All business numbers that may evolve (metric ratios and floors, fame per play,
playlist conflict retries) are centralized here so they can be adjusted without
diving into service logic. Services read these dicts at call time, so tests
can monkeypatch individual values.
"""
from __future__ import annotations

import os

# Default is a lightweight local sqlite file; tests build their own engine.
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+pysqlite:///./radio_settlement.db")

# ------------------------------ Radio Metrics ----------------------------- #
RADIO_METRICS: dict[str, float] = {
	# multiplier = base + r * spread, r drawn from [0, 1)
	"multiplier_base": 0.55,
	"multiplier_spread": 0.35,
	# Derived metric ratios (applied to listeners)
	"hype_ratio": 0.002,
	"streams_ratio": 0.6,
	"sales_ratio": 0.015,
	# Floors
	"min_listeners": 100,
	"min_hype": 1,
	"min_streams": 10,
	"min_sales": 5,
}

# ------------------------------- Band Fame -------------------------------- #
FAME_SETTINGS: dict[str, float | int] = {
	"per_radio_play": 0.1,
	"round_digits": 1,
}

# ------------------------------ Playlists --------------------------------- #
PLAYLIST_SETTINGS: dict[str, int] = {
	# Insert / re-select cycles tolerated when a concurrent run races us on
	# the (show, song, week) uniqueness key.
	"conflict_max_attempts": int(os.getenv("PLAYLIST_CONFLICT_MAX_ATTEMPTS", "3")),
}

# -------------------------------- Logging --------------------------------- #
LOGGING_SETTINGS: dict[str, str | None] = {
	"level": os.getenv("LOG_LEVEL", "INFO"),
	"file": os.getenv("LOG_FILE") or None,
}

__all__ = [
	"DATABASE_URL",
	"RADIO_METRICS",
	"FAME_SETTINGS",
	"PLAYLIST_SETTINGS",
	"LOGGING_SETTINGS",
]
