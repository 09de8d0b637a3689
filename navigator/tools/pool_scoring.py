from __future__ import annotations
from typing import Optional

from navigator.model_interface.loader import load_scorer
from navigator.model_interface.pool_scorer import PoolScorer
from navigator.model_interface.types import Allocation, Pool, Posture, ScoreResult

_scorer: Optional[PoolScorer] = None


def get_scorer() -> PoolScorer:
    """Process-wide scorer, loaded on first use."""
    global _scorer
    if _scorer is None:
        _scorer = load_scorer()
    return _scorer


def reset_scorer() -> None:
    """Forget the cached scorer so the next call re-reads SCORER_MODULE."""
    global _scorer
    _scorer = None


def score_pool(
    pool: Pool,
    posture: Posture,
    investment_amount: float,
    allocation: Optional[Allocation] = None,
    scorer: Optional[PoolScorer] = None,
) -> ScoreResult:
    return (scorer or get_scorer()).score(pool, posture, investment_amount, allocation=allocation)
