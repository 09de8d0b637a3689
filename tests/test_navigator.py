from navigator.navigator import Navigator
from navigator.state_manager import MemoryStore, SessionStore, get_session

from conftest import USDC_ADDR


def _payload(markets, **extra):
    body = {"assets": [{"token": {"address": USDC_ADDR, "symbol": "USDC"}, "valueUSD": 500}],
            "markets": markets}
    body.update(extra)
    return body


def test_plan_inline_vs_feed():
    nav = Navigator()
    assert nav._plan({"assets": [], "markets": []})["source"] == "inline"
    plan = nav._plan({"assets": [], "chain_id": 1})
    assert plan == {"source": "feed", "chain_id": 1}


def test_session_trace_persisted(make_market):
    store = MemoryStore()
    m = make_market("0xa", "PT-USDC-X", USDC_ADDR, expiry="2099-01-01T00:00:00Z")
    out = Navigator(store=store).handle(_payload([m], session_id="s-1"))
    assert out["status"] == "ok"

    sess = get_session("s-1", store=store)
    assert sess["state"] == {"created_by": "Navigator"}
    assert [t["event"] for t in sess["trace"]] == ["plan", "result_meta"]
    assert sess["trace"][1]["data"]["run_id"] == out["run_id"]


class BrokenStore(SessionStore):
    def get(self, session_id):
        raise RuntimeError("ddb down")


def test_session_failures_do_not_fail_request(make_market):
    m = make_market("0xa", "PT-USDC-X", USDC_ADDR, expiry="2099-01-01T00:00:00Z")
    out = Navigator(store=BrokenStore()).handle(_payload([m], session_id="s-2"))
    assert out["status"] == "ok"


def test_trace_resets_between_requests(make_market):
    nav = Navigator()
    m = make_market("0xa", "PT-USDC-X", USDC_ADDR, expiry="2099-01-01T00:00:00Z")
    nav.handle(_payload([m]))
    out = nav.handle(_payload([m]))
    assert [t.get("step", t.get("source")) for t in out["trace"]] == ["inline", "pipeline"]
