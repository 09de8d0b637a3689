from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import TypedDict, Literal, Optional, List, Dict, Any

Posture = Literal["conservative", "neutral", "aggressive"]
StrategyTag = Literal["Best PT", "Best YT", "Risky", "Neutral"]
StrategyType = Literal["PT", "YT", "SPLIT"]


@dataclass(frozen=True)
class Token:
    address: str
    symbol: str
    decimals: int = 18
    chain_id: int = 8453
    price_usd: Optional[float] = None


@dataclass(frozen=True)
class Asset:
    token: Token
    balance: float
    value_usd: float

    @property
    def key(self) -> str:
        """Lookup key used by the matcher: upper symbol, else lower address."""
        return (self.token.symbol or "").upper() or (self.token.address or "").lower()


@dataclass(frozen=True)
class Pool:
    """
    Normalized PT/YT market snapshot.

    attributes:
    - apy, implied_yield: float – percentages (15.8 means 15.8%).
    - pt_price, yt_price, pt_discount: float – fractions in [0, 1].
    """
    address: str
    name: str
    underlying_asset: Token
    maturity: int
    days_to_maturity: int
    tvl: float
    apy: float
    implied_yield: float
    pt_price: float
    yt_price: float
    pt_discount: float
    strategy_tag: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Allocation(TypedDict):
    pt: int
    yt: int


class ScoreResult(TypedDict):
    allocation: Allocation
    score: float
    risk_score: float
    expected_return: float
    effective_apy: float
    strategy: StrategyType
    comment: str


class AssetSummary(TypedDict):
    symbol: str
    address: str
    balance: float
    value_usd: float


class PoolChoices(TypedDict):
    best_pt: Optional[Dict[str, Any]]
    best_yt: Optional[Dict[str, Any]]
    alternatives: List[Dict[str, Any]]


class Recommendation(TypedDict):
    asset: AssetSummary
    pool: Dict[str, Any]
    pools: PoolChoices
    allocation: Allocation
    score: float
    risk_score: float
    expected_apy: float
    expected_return: float
    investment_amount: float
    strategy: StrategyType
    reasoning: str
    risks: List[str]


class Distribution(TypedDict):
    pt_heavy: int
    yt_heavy: int
    balanced: int
    avg_pt_allocation: int
    avg_yt_allocation: int


class Summary(TypedDict):
    total_positions: int
    total_value: float
    weighted_apy: float
    best_overall_apy: float
    distribution: Distribution


class RecommendationSet(TypedDict):
    status: Literal["ok", "no_input", "no_match"]
    message: str
    posture: Posture
    recommendations: List[Recommendation]
    summary: Summary
    top_pools: List[Dict[str, Any]]
