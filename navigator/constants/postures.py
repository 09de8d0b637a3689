POSTURES = ("conservative", "neutral", "aggressive")

# Legacy spellings accepted at the request boundary.
POSTURE_ALIASES = {"moderate": "neutral", "balanced": "neutral"}

# Default PT/YT split (percent) per posture.
POSTURE_ALLOCATIONS = {
    "conservative": {"pt": 100, "yt": 0},
    "neutral":      {"pt": 80,  "yt": 20},
    "aggressive":   {"pt": 0,   "yt": 100},
}

# Risk score end points on a 0-100 scale: all-PT and all-YT.
PT_RISK = 20.0
YT_RISK = 70.0

# Strategy engine profile factor (scales the YT signal after risk adjustment).
PROFILE_FACTORS = {"conservative": 0.4, "neutral": 0.7, "aggressive": 1.0}
