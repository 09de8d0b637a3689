"""
Pool transformer: raw Pendle market records -> normalized Pool snapshots.

PURPOSE:
- Turn the loosely-shaped records returned by /v1/{chainId}/markets/active into
  strict `Pool` objects the matcher and scorers can rely on.
- Derive what the feed does not give us directly: days to maturity, PT/YT price
  estimates, PT discount and a strategy tag.

CONTEXT:
- The feed is known to be inconsistent (missing `details`, missing TVL, odd expiry
  strings). Missing numbers fall back to defaults here instead of raising, so one bad
  market never sinks a whole recommendation run.

CREDITS:
- Original work – no external code reuse.
"""

from __future__ import annotations
import math
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from navigator.constants import strategy_tags as tags
from navigator.constants.chains import SECONDS_PER_DAY, DAYS_PER_YEAR, SUPPORTED_STABLECOINS
from navigator.model_interface.types import Pool, Token
from navigator.utils.address import normalize_address, chain_id_from, is_valid_address

DEFAULT_APY = 0.10            # used when the feed has no usable APY at all
IMPLIED_YIELD_MARKUP = 1.05   # implied ~= apy * 1.05 when impliedApy is missing
DEFAULT_PT_PRICE = 0.95
DEFAULT_YT_PRICE = 0.05
MAX_RATE = 100.0             # 10,000% as a fraction; anything above is feed noise


def _clamp(x: float, lo: float, hi: float) -> float:
    """Clamp x to the [lo, hi] interval."""
    return max(lo, min(hi, x))


def _num(value: Any) -> float:
    """Coerce a feed value to float; anything missing or non-numeric counts as 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        out = float(value)
    except (TypeError, ValueError):
        return 0.0
    return out if math.isfinite(out) else 0.0


def _rate(value: Any) -> float:
    """Coerce an APY fraction; values above MAX_RATE count as missing."""
    out = _num(value)
    return out if out <= MAX_RATE else 0.0


def parse_expiry(expiry: Any) -> int:
    """
    Parse an ISO-8601 expiry into unix seconds.

    returns:
    - int – seconds since epoch, or 0 when the value cannot be parsed.

    notes:
    - A trailing "Z" is accepted; naive timestamps are read as UTC.
    """
    if not isinstance(expiry, str) or not expiry.strip():
        return 0
    text = expiry.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return 0
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def days_until(maturity: int, now: float) -> int:
    """Whole days left until maturity, rounded up; 0 once the market has matured."""
    if maturity <= now:
        return 0
    return math.ceil((maturity - now) / SECONDS_PER_DAY)


def symbol_from_name(name: Optional[str]) -> str:
    """
    Pull the underlying symbol out of a market name.

    "PT-sUSDe-26DEC2024" -> "sUSDe", "sUSDe" -> "sUSDe", no name -> "UNKNOWN".
    """
    if not name:
        return "UNKNOWN"
    parts = name.split("-")
    if len(parts) > 1 and parts[0] == "PT":
        return parts[1]
    return parts[0]


def estimate_prices(implied_yield: float, days_to_maturity: int) -> tuple[float, float]:
    """
    Approximate PT and YT prices from the implied yield (fraction).

    PT ~ 1 - implied * t and YT ~ implied * t with t in years. The two are clamped
    independently, so they need not add up to exactly 1.
    """
    if implied_yield > 0 and days_to_maturity > 0:
        time_factor = days_to_maturity / DAYS_PER_YEAR
        pt = _clamp(1 - implied_yield * time_factor, 0.5, 1.0)
        yt = _clamp(implied_yield * time_factor, 0.0, 0.5)
        return pt, yt
    return DEFAULT_PT_PRICE, DEFAULT_YT_PRICE


def strategy_tag(apy: float, implied_yield: float, pt_discount: float, days_to_maturity: int) -> str:
    """
    Tag a market by its most attractive angle. First matching rule wins.

    parameters:
    - apy, implied_yield: float – compared against the thresholds exactly as given.
      The transformer passes fractions (0.12), so the APY and yield-spread rules only
      fire for percent-scale input.
    - pt_discount: float – fraction; converted to percent before comparison.
    - days_to_maturity: int

    returns:
    - str – "Best PT", "Best YT", "Risky" or "Neutral".
    """
    discount_pct = pt_discount * 100
    yield_diff = implied_yield - apy

    if discount_pct > tags.BEST_PT_MIN_DISCOUNT_PCT and yield_diff > tags.BEST_PT_MIN_YIELD_DIFF:
        return tags.BEST_PT
    if (
        apy > tags.BEST_YT_MIN_APY
        and discount_pct < tags.BEST_YT_MAX_DISCOUNT_PCT
        and days_to_maturity > tags.BEST_YT_MIN_DAYS
    ):
        return tags.BEST_YT
    if apy > tags.RISKY_MIN_APY or discount_pct > tags.RISKY_MIN_DISCOUNT_PCT:
        return tags.RISKY
    return tags.NEUTRAL


def _find_details(address: str, pool_details: Optional[Iterable[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    """Supplementary record for a market, matched on `market` or `address` (case-insensitive)."""
    if not pool_details:
        return None
    target = address.lower()
    for rec in pool_details:
        if not isinstance(rec, dict):
            continue
        for key in ("market", "address"):
            value = rec.get(key)
            if isinstance(value, str) and value.lower() == target:
                return rec
    return None


def transform_market(market: Dict[str, Any], extra: Optional[Dict[str, Any]], now: float) -> Pool:
    """Build one Pool from a market record (assumed to carry address and expiry)."""
    address = market["address"]
    maturity = parse_expiry(market.get("expiry"))
    days = days_until(maturity, now)

    raw_underlying = market.get("underlyingAsset") or ""
    underlying_address = normalize_address(raw_underlying) if isinstance(raw_underlying, str) else ""
    if is_valid_address(underlying_address):
        underlying_address = underlying_address.lower()
    name = market.get("name") or ""
    symbol = symbol_from_name(name)
    underlying = Token(
        address=underlying_address,
        symbol=symbol,
        chain_id=chain_id_from(raw_underlying if isinstance(raw_underlying, str) else ""),
    )

    details = market.get("details") or (extra or {}).get("details") or {}
    if not isinstance(details, dict):
        details = {}
    underlying_apy = _rate(details.get("underlyingApy"))
    implied_apy = _rate(details.get("impliedApy"))
    aggregated_apy = _rate(details.get("aggregatedApy"))

    if aggregated_apy > 0:
        apy = aggregated_apy
    elif underlying_apy > 0:
        apy = underlying_apy
    else:
        apy = DEFAULT_APY
    implied = implied_apy if implied_apy > 0 else apy * IMPLIED_YIELD_MARKUP

    tvl = _num(details.get("totalTvl")) or _num(details.get("liquidity")) or _num((extra or {}).get("tvl"))
    tvl = max(tvl, 0.0)

    pt_price, yt_price = estimate_prices(implied, days)
    pt_discount = 1 - pt_price

    return Pool(
        address=address,
        name=name or f"PT-{symbol}",
        underlying_asset=underlying,
        maturity=maturity,
        days_to_maturity=days,
        tvl=tvl,
        apy=apy * 100,
        implied_yield=implied * 100,
        pt_price=pt_price,
        yt_price=yt_price,
        pt_discount=pt_discount,
        strategy_tag=strategy_tag(apy, implied, pt_discount, days),
    )


def transform_markets(
    markets: List[Dict[str, Any]],
    pool_details: Optional[List[Dict[str, Any]]] = None,
    now: Optional[float] = None,
) -> List[Pool]:
    """
    Normalize a batch of raw market records.

    parameters:
    - markets: list[dict] – records from the market feed.
    - pool_details: list[dict] (optional) – per-market detail records used to backfill
      `details`/`tvl` when the market itself lacks them.
    - now: float (optional) – unix seconds; defaults to the current time.

    returns:
    - list[Pool] – one per record that has both `address` and `expiry`, input order kept.

    raises:
    - TypeError – if `markets` is not a list.
    """
    if not isinstance(markets, list):
        raise TypeError(f"markets must be a list, got {type(markets).__name__}")
    now = time.time() if now is None else now

    pools: List[Pool] = []
    for market in markets:
        if not isinstance(market, dict) or not market.get("address") or not market.get("expiry"):
            continue
        extra = _find_details(market["address"], pool_details)
        pools.append(transform_market(market, extra, now))
    return pools


def filter_stablecoin_pools(pools: List[Pool]) -> List[Pool]:
    """Keep pools whose underlying is one of the supported stablecoins."""
    wanted = {s.upper() for s in SUPPORTED_STABLECOINS}
    return [p for p in pools if p.underlying_asset.symbol.upper() in wanted]
