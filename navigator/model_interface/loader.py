import importlib, os
from .pool_scorer import PoolScorer


def load_scorer() -> PoolScorer:
    """Scorer named by SCORER_MODULE ("package.module:factory"); PostureScorer by default."""
    modpath = os.getenv("SCORER_MODULE")
    if not modpath:
        from navigator.model_impl.posture_scorer import PostureScorer
        return PostureScorer()
    mod, factory = modpath.split(":")
    return getattr(importlib.import_module(mod), factory)()
