BEST_PT = "Best PT"
BEST_YT = "Best YT"
RISKY = "Risky"
NEUTRAL = "Neutral"

STRATEGY_TAGS = (BEST_PT, BEST_YT, RISKY, NEUTRAL)

# Cut-offs compared against the values handed to strategy_tag() as-is.
BEST_PT_MIN_DISCOUNT_PCT = 3
BEST_PT_MIN_YIELD_DIFF = 1
BEST_YT_MIN_APY = 20
BEST_YT_MAX_DISCOUNT_PCT = 2
BEST_YT_MIN_DAYS = 60
RISKY_MIN_APY = 30
RISKY_MIN_DISCOUNT_PCT = 10
