# PURPOSE: The one place loose request data becomes strict core types.
# CONTEXT: Portfolio snapshots arrive in two shapes: "unified" assets carry a token object
#          ({"token": {"address", "symbol", ...}}) while legacy ones carry a bare token
#          address plus a top-level "symbol". Both are folded into `Asset` here so the
#          matcher and scorers never have to guess.
# CREDITS: Original work – no external code reuse.

from __future__ import annotations
import math
from typing import Any, Dict, List

from navigator.constants.chains import BASE_CHAIN_ID
from navigator.constants.postures import POSTURES, POSTURE_ALIASES
from navigator.model_interface.types import Asset, Posture, Token
from navigator.navigator_io import InvalidRequest
from navigator.utils.address import normalize_address, is_valid_address, chain_id_from


def _float(value: Any, default: float = 0.0) -> float:
    try:
        out = float(value)
    except (TypeError, ValueError):
        return default
    return out if math.isfinite(out) else default


def normalize_posture(value: Any) -> Posture:
    """
    Map a request's risk level onto a posture.

    raises:
    - InvalidRequest – for anything that is not a posture or a known alias.
    """
    if value is None:
        return "neutral"
    key = str(value).strip().lower()
    key = POSTURE_ALIASES.get(key, key)
    if key not in POSTURES:
        raise InvalidRequest(f"Unknown risk level: {value!r}")
    return key  # type: ignore[return-value]


def token_from_raw(raw: Any, symbol: str = "", chain_id: int = BASE_CHAIN_ID) -> Token:
    """Token from either a token dict or a (possibly chain-prefixed) address string."""
    if isinstance(raw, dict):
        raw_address = str(raw.get("address") or "")
        address = normalize_address(raw_address)
        price = raw.get("priceUSD", raw.get("price_usd"))
        return Token(
            address=address.lower() if is_valid_address(address) else address,
            symbol=str(raw.get("symbol") or symbol or ""),
            decimals=int(_float(raw.get("decimals"), 18)),
            chain_id=int(_float(raw.get("chainId", raw.get("chain_id")), chain_id_from(raw_address, chain_id))),
            price_usd=_float(price) if price is not None else None,
        )
    raw_address = str(raw or "")
    address = normalize_address(raw_address)
    return Token(
        address=address.lower() if is_valid_address(address) else address,
        symbol=symbol,
        chain_id=chain_id_from(raw_address, chain_id),
    )


def asset_from_raw(raw: Dict[str, Any], chain_id: int = BASE_CHAIN_ID) -> Asset:
    """
    Build an Asset from one portfolio record.

    notes:
    - `balanceFormatted` wins over `balance`, which may be a raw integer string in wei.
    - `valueUSD` / `value_usd` default to 0; zero-value assets are dropped later by the
      aggregator, not here.
    """
    symbol = str(raw.get("symbol") or "")
    token = token_from_raw(raw.get("token"), symbol=symbol, chain_id=chain_id)
    balance = raw.get("balanceFormatted", raw.get("balance"))
    value = raw.get("valueUSD", raw.get("value_usd"))
    return Asset(token=token, balance=_float(balance), value_usd=_float(value))


def assets_from_raw(records: List[Dict[str, Any]], chain_id: int = BASE_CHAIN_ID) -> List[Asset]:
    """
    Normalize a request's asset list.

    raises:
    - TypeError – if `records` is not a list of dicts.
    """
    if not isinstance(records, list):
        raise TypeError(f"assets must be a list, got {type(records).__name__}")
    out = []
    for rec in records:
        if not isinstance(rec, dict):
            raise TypeError(f"asset entries must be objects, got {type(rec).__name__}")
        out.append(asset_from_raw(rec, chain_id=chain_id))
    return out
