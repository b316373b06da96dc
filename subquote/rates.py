"""
Rate table: every price, percentage and throughput constant the quote engine uses.

Prices are in Thai baht. Percentages are fractions (0.15 == 15%).
Throughput is minutes of source material finished per working day.
"""

from .models import Language, TranscriptionVariant, Urgency


# --- Subtitle ---

# First FLAT_MINUTES are billed at the flat rate, each minute after at per_minute.
SUBTITLE_FLAT_MINUTES = 4

SUBTITLE_RATES = {
    Language.THAI: {"flat_rate": 300.0, "per_minute": 29.0},
    Language.ENGLISH: {"flat_rate": 400.0, "per_minute": 54.0},
}

# Add-on fees, each a percentage of base price
SUBTITLE_ADD_ON_FEES = {
    "vlog": 0.15,
    "unclear_audio": 0.20,
    "dual_subs": 0.40,
}

# (minimum minutes, discount): first match wins, so keep descending
SUBTITLE_DURATION_DISCOUNTS = [
    (60, 0.10),
    (30, 0.05),
]

# Dual subtitles carry a fee AND a discount; both apply.
DUAL_SUBS_DISCOUNT = 0.15

SUBTITLE_THROUGHPUT = {
    Language.THAI: {
        Urgency.NONE: 10,
        Urgency.RUSH: 20,
        Urgency.SUPER_RUSH: 30,
        Urgency.ULTRA_RUSH: 40,
    },
    Language.ENGLISH: {
        Urgency.NONE: 8,
        Urgency.RUSH: 12,
        Urgency.SUPER_RUSH: 17,
        Urgency.ULTRA_RUSH: 25,
    },
}


# --- Transcription ---

TRANSCRIPTION_RATES = {
    TranscriptionVariant.TRANSLATION: 35.0,
    TranscriptionVariant.ENGLISH_TRANSCRIPTION: 13.0,
    TranscriptionVariant.VERBATIM: 12.0,
    TranscriptionVariant.INTERVIEW: 11.0,
    TranscriptionVariant.MEETING: 11.0,
    TranscriptionVariant.RESEARCH: 11.0,
    TranscriptionVariant.NORMAL: 9.0,
}

UNCLEAR_AUDIO_PER_MINUTE = 2.0  # flat baht per minute, not a percentage
TIMESTAMP_FEE = 0.30

# Only long-form recordings earn the volume discount
VOLUME_DISCOUNT_VARIANTS = {
    TranscriptionVariant.INTERVIEW,
    TranscriptionVariant.MEETING,
    TranscriptionVariant.RESEARCH,
}

# (minimum hours, discount): first match wins
TRANSCRIPTION_HOUR_DISCOUNTS = [
    (20, 0.15),
    (10, 0.10),
]

TRANSCRIPTION_THROUGHPUT = {
    Urgency.NONE: 12,
    Urgency.RUSH: 20,
    Urgency.SUPER_RUSH: 60,
    Urgency.ULTRA_RUSH: 80,
}


# --- Urgency ---

# Percentage of the pre-urgency subtotal
URGENCY_SURCHARGES = {
    Urgency.NONE: 0.0,
    Urgency.RUSH: 0.30,
    Urgency.SUPER_RUSH: 0.50,
    Urgency.ULTRA_RUSH: 0.70,
}

PRIORITY_LABELS = {
    Urgency.NONE: "normal",
    Urgency.RUSH: "rush",
    Urgency.SUPER_RUSH: "super-rush",
    Urgency.ULTRA_RUSH: "ultra-rush",
}


def rate_table() -> dict:
    """Plain-JSON view of the rate table for the API."""
    return {
        "subtitle": {
            "flat_minutes": SUBTITLE_FLAT_MINUTES,
            "rates": {lang.value: rates for lang, rates in SUBTITLE_RATES.items()},
            "add_on_fees": dict(SUBTITLE_ADD_ON_FEES),
            "duration_discounts": [list(t) for t in SUBTITLE_DURATION_DISCOUNTS],
            "dual_subs_discount": DUAL_SUBS_DISCOUNT,
            "throughput": {
                lang.value: {u.value: mpd for u, mpd in tiers.items()}
                for lang, tiers in SUBTITLE_THROUGHPUT.items()
            },
        },
        "transcription": {
            "rates": {v.value: rate for v, rate in TRANSCRIPTION_RATES.items()},
            "unclear_audio_per_minute": UNCLEAR_AUDIO_PER_MINUTE,
            "timestamp_fee": TIMESTAMP_FEE,
            "volume_discount_variants": sorted(v.value for v in VOLUME_DISCOUNT_VARIANTS),
            "hour_discounts": [list(t) for t in TRANSCRIPTION_HOUR_DISCOUNTS],
            "throughput": {u.value: mpd for u, mpd in TRANSCRIPTION_THROUGHPUT.items()},
        },
        "urgency_surcharges": {u.value: pct for u, pct in URGENCY_SURCHARGES.items()},
    }
