# PURPOSE: Helpers for the address strings that arrive from the Pendle market feed.
# CONTEXT: The feed encodes token addresses as "{chainId}-{address}" (e.g. "8453-0xabc...").
#          Everything downstream compares plain hex addresses, so we strip the prefix once here.
# CREDITS: Original work – no external code reuse.

import re

from navigator.constants.chains import BASE_CHAIN_ID

_HEX_ADDRESS = re.compile(r"^0x[0-9a-fA-F]{40}$")


def normalize_address(raw: str) -> str:
    """
    Drop a chain-id prefix from an address.

    parameters:
    - raw: str – address, possibly in "{chainId}-{address}" form.

    returns:
    - str – the part after the last hyphen, or `raw` unchanged when it has no hyphen.

    notes:
    - Never raises; malformed input simply fails `is_valid_address` later on.
    """
    if not raw:
        return ""
    if "-" in raw:
        return raw.split("-")[-1]
    return raw


def is_valid_address(addr: str) -> bool:
    """True when the normalized string is `0x` followed by exactly 40 hex characters."""
    if not addr:
        return False
    return bool(_HEX_ADDRESS.match(normalize_address(addr)))


def addresses_equal(a: str, b: str) -> bool:
    """Case-insensitive comparison after prefix stripping. Empty inputs never match."""
    if not a or not b:
        return False
    return normalize_address(a).lower() == normalize_address(b).lower()


def chain_id_from(raw: str, default: int = BASE_CHAIN_ID) -> int:
    """
    Read the chain id out of a "{chainId}-{address}" string.

    returns:
    - int – the numeric prefix, or `default` when there is none (or it is not a number).
    """
    if not raw or "-" not in raw:
        return default
    prefix = raw.split("-")[0].strip()
    return int(prefix) if prefix.isdigit() else default


def truncate_address(addr: str, start: int = 6, end: int = 4) -> str:
    """Shorten an address for display, e.g. "0x1234...5678"."""
    if not addr:
        return ""
    norm = normalize_address(addr)
    if len(norm) <= start + end:
        return norm
    return f"{norm[:start]}...{norm[-end:]}"
