from __future__ import annotations
from typing import Optional, Tuple

import numpy as np

from navigator.constants.chains import DAYS_PER_YEAR
from navigator.constants.postures import PT_RISK, YT_RISK
from navigator.utils.rounding import normalize_percent_allocation
from .types import Allocation, Pool, Posture, ScoreResult, StrategyType

# Effective APY at which the return component of the score saturates.
APY_CEILING = 0.30
# TVL at which the liquidity component saturates.
TVL_CEILING = 50_000_000

RETURN_WEIGHT = 50.0
LIQUIDITY_WEIGHT = 30.0
SAFETY_WEIGHT = 20.0


def expected_return(pool: Pool, allocation: Allocation, amount: float) -> float:
    """USD return held to maturity: PT captures the discount, YT collects the APY pro rata."""
    pt_return = pool.pt_discount * amount
    yt_return = (pool.apy / 100.0) * (pool.days_to_maturity / DAYS_PER_YEAR) * amount
    return (pt_return * allocation["pt"] + yt_return * allocation["yt"]) / 100.0


def effective_apy(ret: float, amount: float, days_to_maturity: int) -> float:
    """Annualised return as a fraction; 0 for matured pools or empty positions."""
    if days_to_maturity <= 0 or amount <= 0:
        return 0.0
    return (ret / amount) * (DAYS_PER_YEAR / days_to_maturity)


def risk_score(allocation: Allocation) -> float:
    """Linear between the all-PT and all-YT risk constants, weighted by the YT share."""
    return PT_RISK + (YT_RISK - PT_RISK) * (allocation["yt"] / 100.0)


def liquidity_score(tvl: float) -> float:
    """log-scaled TVL in [0, 1]."""
    tvl = max(float(tvl or 0.0), 0.0)
    return float(np.clip(np.log10(tvl + 1.0) / np.log10(TVL_CEILING), 0.0, 1.0))


def opportunity_score(eff_apy: float, tvl: float, risk: float) -> float:
    """
    Rank pools against each other on a 0-100 scale.

    notes:
    - Never decreases as effective APY or TVL rise; never increases as risk rises.
    """
    ret_part = float(np.clip(eff_apy / APY_CEILING, 0.0, 1.0))
    safety = 1.0 - float(np.clip(risk / 100.0, 0.0, 1.0))
    score = RETURN_WEIGHT * ret_part + LIQUIDITY_WEIGHT * liquidity_score(tvl) + SAFETY_WEIGHT * safety
    return round(float(np.clip(score, 0.0, 100.0)), 2)


def strategy_type(allocation: Allocation) -> StrategyType:
    if allocation["yt"] == 0:
        return "PT"
    if allocation["pt"] == 0:
        return "YT"
    return "SPLIT"


class PoolScorer:
    """
    Base scorer. Subclasses decide the PT/YT split; the return, risk and ranking
    maths is shared so every scorer's output is comparable.
    """

    name = "base"

    def allocate(self, pool: Pool, posture: Posture) -> Tuple[Allocation, str]:
        raise NotImplementedError

    def score(
        self,
        pool: Pool,
        posture: Posture,
        investment_amount: float,
        allocation: Optional[Allocation] = None,
    ) -> ScoreResult:
        """
        Score one pool for one position.

        parameters:
        - pool: Pool – normalized market.
        - posture: Posture – conservative | neutral | aggressive.
        - investment_amount: float – position size in USD.
        - allocation: dict (optional) – {"pt", "yt"} override in percent.

        returns:
        - ScoreResult – allocation, score, risk_score, expected_return, effective_apy,
          strategy and a short comment.
        """
        if allocation is not None:
            alloc = normalize_percent_allocation(allocation)
            comment = "Caller-supplied allocation"
        else:
            alloc, comment = self.allocate(pool, posture)

        amount = float(investment_amount or 0.0)
        ret = expected_return(pool, alloc, amount)
        eff = effective_apy(ret, amount, pool.days_to_maturity)
        risk = risk_score(alloc)
        return {
            "allocation": alloc,
            "score": opportunity_score(eff, pool.tvl, risk),
            "risk_score": round(risk, 2),
            "expected_return": round(ret, 6),
            "effective_apy": round(eff, 6),
            "strategy": strategy_type(alloc),
            "comment": comment,
        }
