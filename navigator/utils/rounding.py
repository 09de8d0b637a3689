# PURPOSE: Turn a PT/YT split into whole percentages that always add up to 100.
# CONTEXT: Used by the scorers so every recommendation carries a clean {pt, yt} pair.
# CREDITS: Original work – no external code reuse.

from decimal import Decimal, ROUND_HALF_UP


def round_allocation(pt_share, yt_share=None):
    """
    Round a PT/YT split to integer percentages.

    parameters:
    - pt_share: float – PT share as a fraction (0.8) of the position.
    - yt_share: float (optional) – YT share; only used to normalise when pt + yt != 1.

    returns:
    - dict – {"pt": int, "yt": int} with pt + yt == 100.

    notes:
    - Uses Decimal with ROUND_HALF_UP so 0.125 -> 13, not 12.
    - YT is derived as the residual (100 - pt) so the pair never drifts off 100.
    """
    pt = Decimal(str(pt_share))
    if yt_share is not None:
        total = pt + Decimal(str(yt_share))
        if total > 0:
            pt = pt / total
    pt = min(max(pt, Decimal(0)), Decimal(1))
    pt_pct = int((pt * 100).quantize(Decimal("1"), ROUND_HALF_UP))
    return {"pt": pt_pct, "yt": 100 - pt_pct}


def normalize_percent_allocation(allocation):
    """
    Accept a caller-supplied {"pt": x, "yt": y} in percent and return integers summing to 100.

    raises:
    - ValueError – when both sides are zero or negative.
    """
    pt = float(allocation.get("pt", 0) or 0)
    yt = float(allocation.get("yt", 0) or 0)
    if pt < 0 or yt < 0 or pt + yt <= 0:
        raise ValueError(f"Invalid allocation: {allocation!r}")
    return round_allocation(pt / 100.0, yt / 100.0)
