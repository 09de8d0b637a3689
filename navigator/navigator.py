"""
Navigator: request controller for the recommendation service.

PURPOSE: Resolves market data for a request (inline snapshot or the live Pendle feed),
         runs the recommendation pipeline and records a lightweight trace.
CONTEXT: Used by the HTTP handler and the CLI. Errors from validation, the feed or the
         engine propagate; the handler decides the status code.
CREDITS: Original work – no external code reuse.
"""

from __future__ import annotations
import os
import time
from typing import Any, Dict, List, Optional

from navigator import state_manager as sm
from navigator import tools
from navigator.adapters import normalize_posture
from navigator.constants.chains import BASE_CHAIN_ID
from navigator.logging_setup import configure_logging
from navigator.model_interface.pool_scorer import PoolScorer
from navigator.navigator_io import validate_request
from navigator.observability import xray_segment
from navigator.pipeline import run_pipeline, _run_id
from navigator.recommendations import STATUS_NO_MATCH, empty_set

log = configure_logging()


class Navigator:
    """High-level controller for Pendle Yield Navigator."""

    def __init__(self, scorer: Optional[PoolScorer] = None, store: Optional[sm.SessionStore] = None):
        self.scorer = scorer
        self.store = store
        # In-memory trace of planning/execution steps for debugging or audits.
        self.trace: List[Dict[str, Any]] = []

    def handle(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Main entry point.

        parameters:
        - payload: dict – RecommendRequest body. Inline `markets` skip the network fetch.

        returns:
        - dict – RecommendationSet plus run_id, pool_count, latency_ms and 'trace'.

        raises:
        - InvalidRequest – malformed request or unknown risk level.
        - MarketFeedError – live market data could not be fetched.

        notes:
        - An empty live feed yields a `no_match` set without running the engine.
        - With a session_id, plan and result meta are appended to the session trace.
          Storage failures are logged and never fail the request.
        """
        self.trace = []
        validate_request(payload)
        plan = self._plan(payload)
        self.trace.append(plan)
        session_id = payload.get("session_id") or os.getenv("SESSION_ID")
        self._persist(session_id, {"event": "plan", "data": plan})

        markets = None
        if plan["source"] == "feed":
            markets = self._fetch_markets(plan["chain_id"])
            if not markets:
                out = self._empty_feed(payload, plan["chain_id"])
                out["trace"] = self.trace
                self._persist(session_id, {"event": "result_meta", "data": {"status": out["status"]}})
                return out

        with xray_segment("recommendations"):
            out = run_pipeline(payload, markets=markets, scorer=self.scorer)

        self.trace.append({"step": "pipeline", "status": out["status"], "pool_count": out.get("pool_count", 0)})
        log.info("recommendations.built", status=out["status"], run_id=out.get("run_id"),
                 recommendations=len(out.get("recommendations", [])), latency_ms=out.get("latency_ms"))
        out["trace"] = self.trace
        self._persist(session_id, {
            "event": "result_meta",
            "data": {"status": out["status"], "run_id": out.get("run_id"),
                     "recommendations": len(out.get("recommendations", []))},
        })
        return out

    def _plan(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Decide where market data comes from.

        rules:
        - `markets` present in the payload (even empty) -> use it as-is.
        - Otherwise fetch the active markets for `chain_id` (default Base).
        """
        chain_id = int(payload.get("chain_id") or BASE_CHAIN_ID)
        if isinstance(payload.get("markets"), list):
            return {"source": "inline", "chain_id": chain_id, "markets": len(payload["markets"])}
        return {"source": "feed", "chain_id": chain_id}

    def _fetch_markets(self, chain_id: int) -> List[Dict[str, Any]]:
        t0 = time.time()
        with xray_segment("market_feed"):
            markets = tools.market_feed.fetch_markets(chain_id)
        self.trace.append({"step": "market_feed", "chain_id": chain_id, "markets": len(markets),
                           "latency_ms": round((time.time() - t0) * 1000, 1)})
        log.info("markets.fetched", chain_id=chain_id, markets=len(markets))
        return markets

    def _empty_feed(self, payload: Dict[str, Any], chain_id: int) -> Dict[str, Any]:
        posture = normalize_posture(payload.get("risk_level"))
        out = dict(empty_set(STATUS_NO_MATCH, f"No active markets found on chain {chain_id}.", posture))
        out.update({"run_id": _run_id(), "pool_count": 0, "latency_ms": 0})
        return out

    def _persist(self, session_id: Optional[str], record: Dict[str, Any]) -> None:
        if not session_id:
            return
        try:
            if sm.get_session(session_id, store=self.store) is None:
                sm.init_session(session_id, meta={"created_by": "Navigator"}, store=self.store)
            sm.append_trace(session_id, record, store=self.store)
        except Exception as e:
            # Never fail the user request because session storage had an issue.
            log.warning("session.persist_failed", session_id=session_id, error=str(e))
