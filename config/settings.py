"""
Configuration settings for Critic Ledger.

Centralized configuration for the normalization engine and its adapters.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = PROJECT_ROOT / "data"
OUTPUT_ROOT = PROJECT_ROOT / "output"
QUARANTINE_DIRNAME = "quarantine"

# API Configuration
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")

# External scorer (LLM)
SCORER_MODEL = "gemini-1.5-flash"
LLM_TEMPERATURE = 0.0
SCORER_MAX_RETRIES = 3
SCORER_MIN_TEXT_WORDS = 40  # Don't ask the scorer about near-empty text
AUTHORITATIVE_CONFIDENCE = ("high", "medium")  # "low" is informative only

# Bucket thresholds (inclusive lower bounds, checked top-down)
BUCKET_THRESHOLDS = (
    ("Rave", 85),
    ("Positive", 70),
    ("Mixed", 55),
    ("Negative", 35),
    ("Pan", 0),
)

# Representative score per bucket (sentiment-word ratings and thumb repairs)
BUCKET_REPRESENTATIVE_SCORES = {
    "Rave": 90,
    "Positive": 75,
    "Mixed": 60,
    "Negative": 40,
    "Pan": 25,
}

# External thumbs -> bucket
THUMB_BUCKETS = {
    "up": "Positive",
    "flat": "Mixed",
    "meh": "Mixed",
    "down": "Negative",
}
TRUSTED_THUMB_SOURCES = ("dtli", "bww")
MAX_THUMB_BUCKET_DISTANCE = 1  # Further apart is an inconsistency

# Content Classifier
MIN_COMPLETE_WORDS = 300
MIN_SUBSTANTIVE_RATIO = 0.5
MIN_NAVIGATION_MATCHES = 2
MULTI_SHOW_MIN_TITLES = 3
WRONG_PRODUCTION_MAX_YEARS_BEFORE = 1

# Quarantine
ALLOW_DELETION = False  # Structural defects are moved, never deleted, unless enabled
DELETION_MIN_FLAGS = 2

# Merge quality weights
MERGE_WEIGHTS = {
    "full_text": 40.0,
    "full_text_per_100_words": 2.0,
    "full_text_length_cap": 30.0,
    "known_critic": 15.0,
    "known_outlet": 10.0,
    "canonical_score": 10.0,
    "llm_score": 5.0,
    "url": 5.0,
}

# Show catalog
ACTIVE_SHOW_STATUSES = ("open", "previews")

# Pipeline
CONTINUE_ON_RECORD_FAILURE = True  # One bad record never blocks the batch

# Logging
LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "critic_ledger.log"


# Design Rationale and Trade-offs:
#
# 1. Why environment variable for the API key?
#    - Secrets stay out of the repository
#    - Trade-off: Requires setting the variable before --score-missing
#
# 2. Why module constants instead of a config file?
#    - Single place for thresholds, weights and paths
#    - Tables that vary per deployment (aliases, catalog) are JSON files instead
#    - Trade-off: Changing a threshold means editing code
#
# 3. Why is ALLOW_DELETION off by default?
#    - Classifier heuristics misfire on unusual pages
#    - A quarantined record can be restored, a deleted one cannot
#    - Trade-off: The quarantine directory grows until someone reviews it
#
# 4. Why fixed bucket thresholds instead of per-outlet calibration?
#    - Every outlet's score means the same thing after normalization
#    - Trade-off: Harsh or generous graders are not corrected
