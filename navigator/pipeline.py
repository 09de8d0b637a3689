# PURPOSE: Request pipeline that validates input, normalizes assets and markets,
#          runs the recommendation engine and validates the final output against schemas.
# CONTEXT: Pure over its inputs; fetching markets and persisting traces live in Navigator.
# CREDITS: Original work – no external code reuse.

from __future__ import annotations
import json, time, uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from navigator.adapters import assets_from_raw, normalize_posture
from navigator.constants.chains import BASE_CHAIN_ID
from navigator.model_interface.pool_scorer import PoolScorer
from navigator.navigator_io import validate_request, validate_recommendation_set
from navigator.pool_transformer import transform_markets, filter_stablecoin_pools
from navigator.recommendations import (
    STATUS_NO_MATCH, TOP_POOLS, empty_set, get_recommendations_for_portfolio, rank_stablecoin_pools,
)


def _run_id() -> str:
    """
    Readable run ID: short random prefix plus a UTC timestamp suffix.
    Example: 'a1b2c3d4-20251021130000'
    """
    return uuid.uuid4().hex[:8] + "-" + datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")


def run_pipeline(
    payload: Dict[str, Any],
    markets: Optional[List[Dict[str, Any]]] = None,
    scorer: Optional[PoolScorer] = None,
    now: Optional[float] = None,
) -> Dict[str, Any]:
    """
    End-to-end recommendation run.

    steps:
    1) Validate the request against the RecommendRequest schema.
    2) Normalize posture and assets at the boundary.
    3) Transform raw markets into pools (markets argument wins over payload["markets"]).
    4) Optionally keep stablecoin pools only (and rank them by stablecoin score).
    5) Aggregate recommendations. Supplied markets that yield no usable pool are a
       no_match; an empty market list stays no_input.
    6) Stamp run_id / latency and validate against the RecommendationSet schema.

    returns:
    - dict – RecommendationSet plus `run_id`, `pool_count` and `latency_ms`.

    raises:
    - InvalidRequest – malformed request or unknown risk level.
    - jsonschema.ValidationError – the result broke the RecommendationSet schema (a server bug).
    """
    t0 = time.time()

    validate_request(payload)

    posture = normalize_posture(payload.get("risk_level"))
    chain_id = int(payload.get("chain_id") or BASE_CHAIN_ID)
    assets = assets_from_raw(payload["assets"], chain_id=chain_id)

    raw_markets = markets if markets is not None else (payload.get("markets") or [])
    pools = transform_markets(raw_markets, payload.get("pool_details"), now=now)
    if payload.get("stablecoin_only"):
        pools = filter_stablecoin_pools(pools)

    funded = any(a.value_usd > 0 for a in assets)
    if raw_markets and not pools and funded:
        # Markets were supplied but none survived transformation or the stablecoin filter.
        out = empty_set(STATUS_NO_MATCH, "No usable pools in the supplied markets.", posture)
    else:
        out = get_recommendations_for_portfolio(assets, pools, posture, scorer=scorer)
    if payload.get("stablecoin_only"):
        out["stablecoin_ranking"] = rank_stablecoin_pools(pools, posture)[:TOP_POOLS]
    out["run_id"] = _run_id()
    out["pool_count"] = len(pools)
    out["latency_ms"] = int((time.time() - t0) * 1000)

    validate_recommendation_set(out)
    return out


if __name__ == "__main__":
    # Quick manual run with a single inline market.
    demo = {
        "assets": [{"token": {"symbol": "USDC", "address": "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913"}, "valueUSD": 10000}],
        "risk_level": "neutral",
        "markets": [{
            "address": "0x0000000000000000000000000000000000000001",
            "name": "PT-USDC-26MAR2027",
            "expiry": "2027-03-26T00:00:00Z",
            "underlyingAsset": "8453-0x833589fcd6edb6e08f4c7c32d4f71b54bda02913",
            "details": {"aggregatedApy": 0.12, "impliedApy": 0.11, "totalTvl": 5_000_000},
        }],
    }
    print(json.dumps(run_pipeline(demo), indent=2))
