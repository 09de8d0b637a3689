# PURPOSE: Signal-driven PT/YT split for the neutral posture.
# CONTEXT: Weighs the PT discount (scaled by time to maturity) against a YT signal built
#          from how far the underlying APY runs above the implied yield, then damps the YT
#          signal by drawdown, volatility and the posture's appetite for risk.
# CREDITS: Original work – no external code reuse.

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Tuple
import math

from navigator.constants.chains import DAYS_PER_YEAR
from navigator.constants.postures import POSTURE_ALLOCATIONS, PROFILE_FACTORS
from navigator.model_interface.pool_scorer import PoolScorer
from navigator.model_interface.types import Allocation, Pool, Posture
from navigator.utils.rounding import round_allocation

MDD_CAP = 0.30   # drawdown that fully suppresses YT
VOL_CAP = 0.25   # volatility that fully suppresses YT


def _clamp(x: float, lo: float, hi: float) -> float:
    """Clamp x to the [lo, hi] interval."""
    return min(hi, max(lo, x))


def pt_yt_allocation(
    pt_price: float,
    apy_7d: float,
    apy_30d: float,
    maturity_days: int,
    sensitivity: float,
    max_drawdown: float,
    volatility: float,
    posture: Posture,
) -> Dict[str, object]:
    """
    Risk-adjusted PT/YT split.

    parameters:
    - pt_price: float – PT price as a fraction of the underlying.
    - apy_7d, apy_30d: float – short and long APY readings (fractions); their relative
      difference is the YT trend signal.
    - maturity_days: int – days left; longer maturities make the PT discount worth more.
    - sensitivity: float – YT leverage to the APY trend.
    - max_drawdown, volatility: float – recent YT drawdown and APY volatility (fractions).
    - posture: Posture – scales the YT signal (0.4 / 0.7 / 1.0).

    returns:
    - dict – {"pt_percentage", "yt_percentage", "comment", "risk_factor"}; percentages are
      fractions that add up to 1.
    """
    discount = 1 - pt_price
    pt_score = discount * math.sqrt(max(maturity_days, 1) / DAYS_PER_YEAR)

    trend = (apy_7d - apy_30d) / apy_30d if apy_30d > 0 else 0.0
    yt_score = max(trend * sensitivity, 0.0)

    mdd_norm = min(max_drawdown / MDD_CAP, 1.0)
    vol_norm = min(volatility / VOL_CAP, 1.0)
    risk_factor = (1 - mdd_norm) * (1 - vol_norm) * PROFILE_FACTORS.get(posture, PROFILE_FACTORS["neutral"])
    yt_adjusted = yt_score * risk_factor

    if pt_score + yt_adjusted <= 0:
        return {
            "pt_percentage": 1.0,
            "yt_percentage": 0.0,
            "comment": "YT suppressed by risk model",
            "risk_factor": risk_factor,
        }

    pt_pct = pt_score / (pt_score + yt_adjusted)
    yt_pct = yt_adjusted / (pt_score + yt_adjusted)

    if yt_pct > 0.7:
        comment = "Aggressive YT (trend strong + low risk)"
    elif yt_pct > 0.4:
        comment = "Balanced allocation"
    elif yt_pct < 0.1:
        comment = "Prefer PT (risk model suppresses YT)"
    else:
        comment = "Mild YT positioning"

    return {
        "pt_percentage": pt_pct,
        "yt_percentage": yt_pct,
        "comment": comment,
        "risk_factor": risk_factor,
    }



# Stablecoin pool score weights (sum to 100) and saturation points.
STABLE_WEIGHTS = {"discount": 30, "trend": 25, "risk": 20, "maturity": 15, "tvl": 10}
STABLE_DISCOUNT_CAP = 0.15
STABLE_TREND_CAP = 0.10
STABLE_MATURITY_TARGET_DAYS = 120
STABLE_TVL_CAP = 50_000_000


def score_stablecoin_pool(
    pt_price: float,
    apy_7d: float,
    apy_30d: float,
    maturity_days: int,
    tvl: float,
    sensitivity: float,
    max_drawdown: float,
    volatility: float,
    posture: Posture,
) -> int:
    """
    0-100 attractiveness of a stablecoin pool.

    Blends the PT discount (full marks at 15%), the APY trend (full marks at +10%), the
    `pt_yt_allocation` risk factor, closeness of maturity to 120 days and log-scaled TVL
    (full marks at $50M), weighted 30/25/20/15/10.
    """
    risk_factor = pt_yt_allocation(
        pt_price, apy_7d, apy_30d, maturity_days, sensitivity, max_drawdown, volatility, posture
    )["risk_factor"]

    discount_score = _clamp((1 - pt_price) / STABLE_DISCOUNT_CAP, 0.0, 1.0)
    trend = (apy_7d - apy_30d) / apy_30d if apy_30d > 0 else 0.0
    trend_score = _clamp(trend / STABLE_TREND_CAP, 0.0, 1.0)
    maturity_score = _clamp(
        1 - abs((maturity_days - STABLE_MATURITY_TARGET_DAYS) / STABLE_MATURITY_TARGET_DAYS), 0.0, 1.0
    )
    # log(tvl) is negative below $1 of liquidity; floor at 0.
    tvl_score = _clamp(math.log(tvl) / math.log(STABLE_TVL_CAP), 0.0, 1.0) if tvl > 1 else 0.0

    total = (
        STABLE_WEIGHTS["discount"] * discount_score
        + STABLE_WEIGHTS["trend"] * trend_score
        + STABLE_WEIGHTS["risk"] * float(risk_factor)
        + STABLE_WEIGHTS["maturity"] * maturity_score
        + STABLE_WEIGHTS["tvl"] * tvl_score
    )
    return int(math.floor(total + 0.5))


@dataclass
class SignalConfig:
    """
    Market assumptions the pool snapshot does not carry.

    attributes:
    - sensitivity: float – YT delta to the APY trend.
    - max_drawdown: float – assumed recent YT drawdown.
    - volatility: float – assumed APY volatility.
    - min_yt, max_yt: int – bounds on the neutral YT share (percent), so neutral always
      sits strictly between the all-PT and all-YT postures.
    """
    sensitivity: float = 1.5
    max_drawdown: float = 0.10
    volatility: float = 0.15
    min_yt: int = 10
    max_yt: int = 90


class SignalScorer(PoolScorer):
    """
    Conservative and aggressive keep their fixed splits; neutral follows the signal:
    underlying APY above the implied yield means YT is priced cheap.
    """

    name = "signal"

    def __init__(self, config: SignalConfig | None = None):
        self.config = config or SignalConfig()

    def allocate(self, pool: Pool, posture: Posture) -> Tuple[Allocation, str]:
        if posture != "neutral":
            fixed = POSTURE_ALLOCATIONS[posture]
            return {"pt": fixed["pt"], "yt": fixed["yt"]}, f"Fixed {posture} split"

        cfg = self.config
        sig = pt_yt_allocation(
            pt_price=pool.pt_price,
            apy_7d=pool.apy / 100.0,
            apy_30d=pool.implied_yield / 100.0,
            maturity_days=pool.days_to_maturity,
            sensitivity=cfg.sensitivity,
            max_drawdown=cfg.max_drawdown,
            volatility=cfg.volatility,
            posture=posture,
        )
        alloc = round_allocation(sig["pt_percentage"], sig["yt_percentage"])
        yt = int(_clamp(alloc["yt"], cfg.min_yt, cfg.max_yt))
        return {"pt": 100 - yt, "yt": yt}, str(sig["comment"])


def stablecoin_score(pool: Pool, posture: Posture = "neutral", config: SignalConfig | None = None) -> int:
    """`score_stablecoin_pool` for a normalized Pool, reading trend inputs the same way as SignalScorer."""
    cfg = config or SignalConfig()
    return score_stablecoin_pool(
        pt_price=pool.pt_price,
        apy_7d=pool.apy / 100.0,
        apy_30d=pool.implied_yield / 100.0,
        maturity_days=pool.days_to_maturity,
        tvl=pool.tvl,
        sensitivity=cfg.sensitivity,
        max_drawdown=cfg.max_drawdown,
        volatility=cfg.volatility,
        posture=posture,
    )
