"""
Recommendation aggregator.

PURPOSE:
- Turn (assets, pools, posture) into a ranked RecommendationSet: one entry per held
  asset that matched at least one pool, plus portfolio-level summary numbers.

CONTEXT:
- Pure and synchronous: no I/O, nothing shared between calls. The HTTP layer maps the
  `status` marker to a response code (no_input -> 400, no_match -> 404).

CREDITS:
- Original work – no external code reuse.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

import numpy as np

from navigator.asset_matcher import find_matching_pools
from navigator.model_impl.signal_scorer import stablecoin_score
from navigator.model_interface.pool_scorer import PoolScorer
from navigator.model_interface.types import (
    Asset, Distribution, Pool, Posture, Recommendation, RecommendationSet, ScoreResult,
)
from navigator.tools.pool_scoring import score_pool
from navigator.tools.risk_alerts import risks_for

STATUS_OK = "ok"
STATUS_NO_INPUT = "no_input"
STATUS_NO_MATCH = "no_match"

DEFAULT_RANKING_AMOUNT = 1000.0
TOP_POOLS = 5
MAX_ALTERNATIVES = 3


# -------------------- Legacy per-strategy heuristics -------------------- #

def score_pool_for_pt(pool: Pool) -> float:
    """
    How attractive a pool is for holding PT. Higher is better.

    Rewards a deep discount, implied yield above the underlying APY, liquidity and a
    30-180 day maturity.
    """
    discount_score = pool.pt_discount * 100
    yield_diff = pool.implied_yield - pool.apy
    tvl_score = min((pool.tvl / 1_000_000) * 10, 100)
    maturity_score = 100 if 30 < pool.days_to_maturity < 180 else 50
    return (
        discount_score * 0.4
        + max(0.0, yield_diff * 3) * 0.3
        + tvl_score * 0.2
        + maturity_score * 0.1
    )


def score_pool_for_yt(pool: Pool) -> float:
    """How attractive a pool is for holding YT: high APY, thin discount, long runway."""
    apy_score = min(pool.apy, 50)
    discount_score = 100 if pool.pt_discount < 0.02 else 50
    tvl_score = min((pool.tvl / 1_000_000) * 10, 100)
    maturity_score = 100 if pool.days_to_maturity > 60 else 50
    return apy_score * 0.4 + discount_score * 0.3 + tvl_score * 0.2 + maturity_score * 0.1


# -------------------- Summary helpers -------------------- #

def strategy_distribution(recommendations: List[Recommendation]) -> Distribution:
    """Count PT-heavy (pt >= 70), YT-heavy (yt >= 70) and balanced picks; average splits."""
    if not recommendations:
        return {"pt_heavy": 0, "yt_heavy": 0, "balanced": 0, "avg_pt_allocation": 0, "avg_yt_allocation": 0}

    pt_heavy = yt_heavy = balanced = 0
    for rec in recommendations:
        pt, yt = rec["allocation"]["pt"], rec["allocation"]["yt"]
        if pt >= 70:
            pt_heavy += 1
        elif yt >= 70:
            yt_heavy += 1
        else:
            balanced += 1

    return {
        "pt_heavy": pt_heavy,
        "yt_heavy": yt_heavy,
        "balanced": balanced,
        "avg_pt_allocation": int(round(np.mean([r["allocation"]["pt"] for r in recommendations]))),
        "avg_yt_allocation": int(round(np.mean([r["allocation"]["yt"] for r in recommendations]))),
    }


def _empty_summary() -> Dict[str, Any]:
    return {
        "total_positions": 0,
        "total_value": 0.0,
        "weighted_apy": 0.0,
        "best_overall_apy": 0.0,
        "distribution": strategy_distribution([]),
    }


def empty_set(status: str, message: str, posture: Posture) -> RecommendationSet:
    return {
        "status": status,
        "message": message,
        "posture": posture,
        "recommendations": [],
        "summary": _empty_summary(),
        "top_pools": [],
    }


# -------------------- Ranking -------------------- #

def _ranked(scored: List[tuple[Pool, ScoreResult]]) -> List[tuple[Pool, ScoreResult]]:
    # Highest score first; ties go to the deeper pool, then to input order.
    return sorted(scored, key=lambda ps: (-ps[1]["score"], -ps[0].tvl))


def rank_pools(
    pools: List[Pool],
    posture: Posture = "neutral",
    investment_amount: float = DEFAULT_RANKING_AMOUNT,
    scorer: Optional[PoolScorer] = None,
) -> List[Dict[str, Any]]:
    """
    Score every pool for a notional position and rank them.

    returns:
    - list[dict] – [{"rank", "pool", "allocation", "score", "risk_score", "expected_apy"}],
      rank 1 first.
    """
    scored = [(p, score_pool(p, posture, investment_amount, scorer=scorer)) for p in pools]
    return [
        {
            "rank": i,
            "pool": pool.to_dict(),
            "allocation": res["allocation"],
            "score": res["score"],
            "risk_score": res["risk_score"],
            "expected_apy": round(res["effective_apy"] * 100, 4),
        }
        for i, (pool, res) in enumerate(_ranked(scored), start=1)
    ]


def best_opportunity(
    pools: List[Pool],
    posture: Posture = "neutral",
    scorer: Optional[PoolScorer] = None,
) -> Optional[Dict[str, Any]]:
    """Top-ranked pool for a notional position, or None when there are no pools."""
    ranked = rank_pools(pools, posture, scorer=scorer)
    return ranked[0] if ranked else None


def rank_stablecoin_pools(pools: List[Pool], posture: Posture = "neutral") -> List[Dict[str, Any]]:
    """
    Rank stablecoin pools by `stablecoin_score` (0-100), highest first; ties go to TVL.

    returns:
    - list[dict] – [{"rank", "pool", "stablecoin_score"}], rank 1 first.
    """
    scored = sorted(
        ((p, stablecoin_score(p, posture)) for p in pools),
        key=lambda ps: (-ps[1], -ps[0].tvl),
    )
    return [
        {"rank": i, "pool": pool.to_dict(), "stablecoin_score": score}
        for i, (pool, score) in enumerate(scored, start=1)
    ]


# -------------------- Per-asset recommendation -------------------- #

def _reasoning(pool: Pool, res: ScoreResult) -> str:
    alloc = res["allocation"]
    return (
        f"{res['strategy']} {alloc['pt']}/{alloc['yt']} in {pool.name}: {res['comment']}. "
        f"{pool.days_to_maturity} days to maturity, PT discount {pool.pt_discount:.2%}, "
        f"implied yield {pool.implied_yield:.2f}%."
    )


def recommend_pools_for_asset(
    asset: Asset,
    candidates: List[Pool],
    posture: Posture = "neutral",
    scorer: Optional[PoolScorer] = None,
) -> Optional[Recommendation]:
    """
    Score each candidate pool with the asset's USD value and keep the best.

    returns:
    - Recommendation, or None when there are no candidates.

    notes:
    - `pools.best_pt` / `pools.best_yt` come from the PT- and YT-specific heuristics, so
      callers can show both angles regardless of the posture's pick.
    - `alternatives` leaves out only best_pt and best_yt, so the top pick can appear there.
    """
    if not candidates:
        return None

    amount = asset.value_usd
    scored = [(p, score_pool(p, posture, amount, scorer=scorer)) for p in candidates]
    ranked = _ranked(scored)
    top_pool, top = ranked[0]

    best_pt = max(candidates, key=score_pool_for_pt)
    best_yt = max(candidates, key=score_pool_for_yt)
    alternatives = [
        p.to_dict() for p, _ in ranked
        if p.address not in (best_pt.address, best_yt.address)
    ][:MAX_ALTERNATIVES]

    return {
        "asset": {
            "symbol": asset.token.symbol,
            "address": asset.token.address,
            "balance": asset.balance,
            "value_usd": asset.value_usd,
        },
        "pool": top_pool.to_dict(),
        "pools": {
            "best_pt": best_pt.to_dict(),
            "best_yt": best_yt.to_dict(),
            "alternatives": alternatives,
        },
        "allocation": top["allocation"],
        "score": top["score"],
        "risk_score": top["risk_score"],
        "expected_apy": round(top["effective_apy"] * 100, 4),
        "expected_return": top["expected_return"],
        "investment_amount": amount,
        "strategy": top["strategy"],
        "reasoning": _reasoning(top_pool, top),
        "risks": risks_for(top_pool, top),
    }


# -------------------- Portfolio -------------------- #

def get_recommendations_for_portfolio(
    assets: List[Asset],
    pools: List[Pool],
    posture: Posture = "neutral",
    scorer: Optional[PoolScorer] = None,
    fuzzy: Optional[bool] = None,
) -> RecommendationSet:
    """
    Build the ranked recommendation set for a whole portfolio.

    parameters:
    - assets: list[Asset] – holdings; those worth <= 0 USD are ignored.
    - pools: list[Pool] – normalized markets.
    - posture: Posture – conservative | neutral | aggressive.
    - scorer: PoolScorer (optional) – defaults to the loaded scorer.
    - fuzzy: bool (optional) – matcher mode; None reads MATCH_MODE.

    returns:
    - RecommendationSet – `status` is "no_input" when there are no assets with value or no
      pools, "no_match" when nothing matched, otherwise "ok".

    raises:
    - TypeError – if `assets` or `pools` is not a list.
    """
    if not isinstance(assets, list) or not isinstance(pools, list):
        raise TypeError("assets and pools must be lists")

    if not assets:
        return empty_set(STATUS_NO_INPUT, "Assets array is required.", posture)
    if not pools:
        return empty_set(STATUS_NO_INPUT, "No valid pools found.", posture)

    funded = [a for a in assets if (a.value_usd or 0) > 0]
    if not funded:
        return empty_set(STATUS_NO_INPUT, "No assets with value found.", posture)

    matches = find_matching_pools(funded, pools, fuzzy=fuzzy)
    if not matches:
        return empty_set(STATUS_NO_MATCH, "No matching pools found for your assets.", posture)

    recommendations: List[Recommendation] = []
    for asset in funded:
        rec = recommend_pools_for_asset(asset, matches.get(asset.key, []), posture, scorer=scorer)
        if rec is not None:
            recommendations.append(rec)

    recommendations.sort(key=lambda r: r["score"], reverse=True)

    values = np.array([r["investment_amount"] for r in recommendations], dtype=float)
    apys = np.array([r["expected_apy"] for r in recommendations], dtype=float)
    total_value = float(values.sum())
    weighted_apy = float(np.average(apys, weights=values)) if total_value > 0 else 0.0
    if not np.isfinite(weighted_apy):
        weighted_apy = 0.0

    return {
        "status": STATUS_OK,
        "message": f"{len(recommendations)} recommendation(s) across {len(pools)} pools.",
        "posture": posture,
        "recommendations": recommendations,
        "summary": {
            "total_positions": len(recommendations),
            "total_value": round(total_value, 2),
            "weighted_apy": round(weighted_apy, 4),
            "best_overall_apy": float(apys.max()),
            "distribution": strategy_distribution(recommendations),
        },
        "top_pools": rank_pools(pools, posture, scorer=scorer)[:TOP_POOLS],
    }
