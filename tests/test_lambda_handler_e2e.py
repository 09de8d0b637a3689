import json

import pytest
from jsonschema import ValidationError

from navigator.lambda_handler import handler
from navigator.tools.market_feed import MarketFeedError

USDC_ADDR = "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913"


class Ctx:
    aws_request_id = "req-xyz"


@pytest.fixture
def live_markets(make_market):
    # Far-future expiry: the handler runs against the wall clock.
    return [make_market("0x00000000000000000000000000000000000000a1", "PT-USDC-01JAN2099", USDC_ADDR,
                        expiry="2099-01-01T00:00:00Z",
                        details={"aggregatedApy": 0.12, "impliedApy": 0.11, "totalTvl": 5_000_000})]


def _event(body):
    return {"body": json.dumps(body), "headers": {"x-correlation-id": "corr-1"}}


def _assets(symbol="USDC", value=10_000):
    return [{"token": {"address": USDC_ADDR if symbol == "USDC" else "", "symbol": symbol}, "valueUSD": value}]


def test_handler_ok_with_inline_markets(live_markets):
    resp = handler(_event({"assets": _assets(), "risk_level": "neutral", "markets": live_markets}), Ctx())
    assert resp["statusCode"] == 200
    assert resp["headers"]["Content-Type"] == "application/json"
    data = json.loads(resp["body"])
    assert data["status"] == "ok"
    assert data["recommendations"][0]["allocation"] == {"pt": 80, "yt": 20}
    assert data["trace"][0]["source"] == "inline"


def test_handler_fetches_feed_when_no_markets(monkeypatch, live_markets):
    calls = []
    monkeypatch.setattr("navigator.tools.market_feed.fetch_markets",
                        lambda chain_id: calls.append(chain_id) or live_markets)
    resp = handler(_event({"assets": _assets(), "chain_id": 8453}), Ctx())
    assert resp["statusCode"] == 200
    assert calls == [8453]


def test_handler_empty_assets_is_400(live_markets):
    resp = handler(_event({"assets": [], "markets": live_markets}), Ctx())
    assert resp["statusCode"] == 400
    assert json.loads(resp["body"])["status"] == "no_input"


def test_handler_schema_invalid_request_is_400():
    resp = handler(_event({"risk_level": "neutral"}), Ctx())
    assert resp["statusCode"] == 400
    body = json.loads(resp["body"])
    assert body["status"] == "error"
    assert "assets" in body["messages"][0]
    assert "latency_ms" in body


def test_handler_bad_json_is_400():
    resp = handler({"body": "{not json"}, Ctx())
    assert resp["statusCode"] == 400


def test_handler_no_match_is_404(live_markets):
    resp = handler(_event({"assets": _assets("ETH"), "markets": live_markets}), Ctx())
    assert resp["statusCode"] == 404
    assert json.loads(resp["body"])["status"] == "no_match"


def test_handler_empty_feed_is_404(monkeypatch):
    monkeypatch.setattr("navigator.tools.market_feed.fetch_markets", lambda chain_id: [])
    resp = handler(_event({"assets": _assets()}), Ctx())
    assert resp["statusCode"] == 404
    assert "No active markets" in json.loads(resp["body"])["message"]


def test_handler_feed_failure_is_500(monkeypatch):
    def boom(chain_id):
        raise MarketFeedError("feed down")
    monkeypatch.setattr("navigator.tools.market_feed.fetch_markets", boom)
    resp = handler(_event({"assets": _assets()}), Ctx())
    assert resp["statusCode"] == 500
    assert "feed down" in json.loads(resp["body"])["messages"][0]


def test_handler_unexpected_exception_is_500(monkeypatch):
    def boom(self, body):
        raise RuntimeError("boom")
    monkeypatch.setattr("navigator.navigator.Navigator.handle", boom)
    resp = handler({"body": {"assets": []}}, Ctx())
    assert resp["statusCode"] == 500
    body = json.loads(resp["body"])
    assert body["status"] == "error"
    assert body["messages"][0] == "RuntimeError: boom"


def test_handler_error_messages_are_plain_strings():
    body = json.loads(handler(_event({"risk_level": "neutral"}), Ctx())["body"])
    assert all(isinstance(m, str) for m in body["messages"])


def test_handler_unknown_risk_level_is_400(live_markets):
    resp = handler(_event({"assets": _assets(), "risk_level": "yolo", "markets": live_markets}), Ctx())
    assert resp["statusCode"] == 400


def test_handler_unusable_markets_is_404():
    broken = [{"name": "PT-USDC-X", "expiry": "2099-01-01T00:00:00Z"}]
    resp = handler(_event({"assets": _assets(), "markets": broken}), Ctx())
    assert resp["statusCode"] == 404
    assert json.loads(resp["body"])["status"] == "no_match"


def test_handler_result_schema_failure_is_500(monkeypatch, live_markets):
    def broken_result(result):
        raise ValidationError("'weird' is not one of ['ok', 'no_input', 'no_match']")
    monkeypatch.setattr("navigator.pipeline.validate_recommendation_set", broken_result)
    resp = handler(_event({"assets": _assets(), "markets": live_markets}), Ctx())
    assert resp["statusCode"] == 500
    assert json.loads(resp["body"])["messages"][0].startswith("ValidationError:")


def test_handler_engine_type_error_is_500(monkeypatch, live_markets):
    def broken_engine(*args, **kwargs):
        raise TypeError("assets and pools must be lists")
    monkeypatch.setattr("navigator.pipeline.get_recommendations_for_portfolio", broken_engine)
    resp = handler(_event({"assets": _assets(), "markets": live_markets}), Ctx())
    assert resp["statusCode"] == 500
    assert "TypeError" in json.loads(resp["body"])["messages"][0]
