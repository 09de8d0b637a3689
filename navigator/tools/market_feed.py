# PURPOSE: Fetch active Pendle markets for a chain.
# CONTEXT: Used by Navigator when a request does not carry its own market snapshot.
# CREDITS: Original work – no external code reuse.

import os
from typing import Any, Dict, List, Optional

import requests

PENDLE_API_BASE = os.getenv("PENDLE_API_BASE", "https://api-v2.pendle.finance")
MARKETS_ACTIVE = "/v1/{chain_id}/markets/active"
DEFAULT_TIMEOUT = float(os.getenv("PENDLE_TIMEOUT_SECONDS", "10"))


class MarketFeedError(RuntimeError):
    """The market feed could not be reached or returned something unusable."""


def markets_url(chain_id: int, base: Optional[str] = None) -> str:
    return (base or PENDLE_API_BASE).rstrip("/") + MARKETS_ACTIVE.format(chain_id=chain_id)


def fetch_markets(chain_id: int, timeout: Optional[float] = DEFAULT_TIMEOUT) -> List[Dict[str, Any]]:
    """
    Download the active markets for `chain_id`.

    parameters:
    - chain_id: int – EVM chain id (8453 for Base).
    - timeout: float (optional) – max seconds to wait for the response.

    returns:
    - list[dict] – raw market records; `{"markets": [...]}` and bare lists are both accepted.

    raises:
    - MarketFeedError – on HTTP errors, timeouts or a non-JSON body.
    """
    url = markets_url(chain_id)
    try:
        r = requests.get(url, timeout=timeout, headers={"Accept": "application/json"})
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as e:
        raise MarketFeedError(f"Pendle market feed failed for chain {chain_id}: {e}") from e

    if isinstance(data, dict):
        data = data.get("markets") or []
    if not isinstance(data, list):
        raise MarketFeedError(f"Unexpected market feed payload: {type(data).__name__}")
    return [m for m in data if isinstance(m, dict)]
