"""Centralized constants for cardwise.

Scheduling numbers and storage defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Scheduling ----------
DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3

AGAIN_EASE_PENALTY = 0.2
HARD_EASE_PENALTY = 0.15
EASY_EASE_BONUS = 0.15

HARD_INTERVAL_MULTIPLIER = 0.8
EASY_INTERVAL_MULTIPLIER = 1.5

AGAIN_INTERVAL_DAYS = 1 / (24 * 60)  # one minute
MIN_INTERVAL_DAYS = 1

# ---------- Storage ----------
DECKS_KEY = "flashcardDecks"
REVIEW_LOGS_KEY = "flashcardReviewLogs"

# ---------- Reporting ----------
DEFAULT_ACTIVITY_DAYS = 7

# ---------- Server ----------
DEFAULT_SERVER_HOST = "127.0.0.1"
DEFAULT_SERVER_PORT = 8777
