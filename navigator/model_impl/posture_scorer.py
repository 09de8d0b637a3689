from navigator.constants.postures import POSTURE_ALLOCATIONS
from navigator.model_interface.pool_scorer import PoolScorer
from navigator.model_interface.types import Pool, Posture, Allocation

_COMMENTS = {
    "conservative": "Hold PT to maturity for a fixed return",
    "neutral": "Mostly PT with a slice of YT for upside",
    "aggressive": "Full YT exposure to the floating yield",
}


class PostureScorer(PoolScorer):
    """Fixed PT/YT split per posture."""

    name = "posture"

    def __init__(self, allocations=None):
        self.allocations = allocations or POSTURE_ALLOCATIONS

    def allocate(self, pool: Pool, posture: Posture) -> tuple[Allocation, str]:
        alloc = self.allocations[posture]
        return {"pt": int(alloc["pt"]), "yt": int(alloc["yt"])}, _COMMENTS.get(posture, "")
