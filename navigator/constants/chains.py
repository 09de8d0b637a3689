BASE_CHAIN_ID = 8453

SECONDS_PER_DAY = 86400
DAYS_PER_YEAR = 365

# Underlying assets the navigator lists when callers ask for stablecoin pools only.
SUPPORTED_STABLECOINS = ("USDC", "sUSDe", "cUSD", "USD0++", "fUSD", "sKAITO")
