# PURPOSE: Match a user's holdings to the Pendle pools that accept them.
# CONTEXT: Matching is deliberately lenient by default ("USDC" also matches "sUSDC"),
#          which can over-match ("USD" hits both "sUSDe" and "USD0++"). Set MATCH_MODE=exact
#          to keep only exact symbol/address matches.
# CREDITS: Original work – no external code reuse.

from __future__ import annotations
import os
from typing import Dict, List, Optional

from navigator.model_interface.types import Asset, Pool


def fuzzy_matching_enabled() -> bool:
    """Read MATCH_MODE (fuzzy|exact); anything other than 'exact' keeps fuzzy matching on."""
    return os.getenv("MATCH_MODE", "fuzzy").strip().lower() != "exact"


def is_asset_match(asset_symbol: str, pool_symbol: str, fuzzy: bool = True) -> bool:
    """Symbol-only check: exact (case-insensitive), or containment either way when fuzzy."""
    a = (asset_symbol or "").strip().upper()
    p = (pool_symbol or "").strip().upper()
    if not a or not p:
        return False
    if a == p:
        return True
    return fuzzy and (a in p or p in a)


def _pool_matches(symbol: str, address: str, pool: Pool, fuzzy: bool) -> bool:
    pool_symbol = (pool.underlying_asset.symbol or "").upper()
    pool_address = (pool.underlying_asset.address or "").lower()

    if symbol and pool_symbol and symbol == pool_symbol:
        return True
    if address and pool_address and address == pool_address:
        return True
    return bool(fuzzy and symbol and pool_symbol and (symbol in pool_symbol or pool_symbol in symbol))


def find_matching_pools(
    assets: List[Asset],
    pools: List[Pool],
    fuzzy: Optional[bool] = None,
) -> Dict[str, List[Pool]]:
    """
    Map each asset to the pools it could be deposited into.

    parameters:
    - assets: list[Asset] – user holdings.
    - pools: list[Pool] – normalized markets.
    - fuzzy: bool (optional) – substring matching on/off; None reads MATCH_MODE.

    returns:
    - dict – asset key (upper symbol, else lower address) -> matching pools in pool order.
      Assets with no match, or with neither symbol nor address, are left out.
    """
    if fuzzy is None:
        fuzzy = fuzzy_matching_enabled()

    matches: Dict[str, List[Pool]] = {}
    for asset in assets:
        symbol = (asset.token.symbol or "").upper()
        address = (asset.token.address or "").lower()
        key = asset.key
        if not key:
            continue

        found = [p for p in pools if _pool_matches(symbol, address, p, fuzzy)]
        if found:
            matches[key] = found
    return matches


def unique_underlying_assets(pools: List[Pool]) -> List[str]:
    """Sorted, upper-cased underlying symbols across `pools`."""
    return sorted({p.underlying_asset.symbol.upper() for p in pools if p.underlying_asset.symbol})
