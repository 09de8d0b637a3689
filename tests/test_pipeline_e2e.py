import json

import pytest

from navigator.navigator_io import InvalidRequest
from navigator.pipeline import run_pipeline

from conftest import NOW, USDC_ADDR


def _payload(markets, **extra):
    body = {
        "assets": [{"token": {"address": USDC_ADDR, "symbol": "USDC"}, "valueUSD": 10_000}],
        "risk_level": "conservative",
        "markets": markets,
    }
    body.update(extra)
    return body


def test_pipeline_ok(markets):
    out = run_pipeline(_payload(markets), now=NOW)
    assert out["status"] == "ok"
    assert out["posture"] == "conservative"
    assert out["pool_count"] == 2
    assert out["recommendations"][0]["allocation"] == {"pt": 100, "yt": 0}
    assert out["recommendations"][0]["strategy"] == "PT"
    assert out["run_id"]
    assert out["latency_ms"] >= 0


def test_pipeline_markets_argument_wins(markets):
    out = run_pipeline(_payload([]), markets=markets[:1], now=NOW)
    assert out["pool_count"] == 1


def test_pipeline_stablecoin_only(markets, make_market):
    weth = make_market("0x7", "PT-WETH-X", "0x" + "3" * 40, details={"totalTvl": 1})
    out = run_pipeline(_payload(markets + [weth], stablecoin_only=True), now=NOW)
    assert out["pool_count"] == 2


def test_pipeline_empty_assets_is_no_input(markets):
    out = run_pipeline(dict(_payload(markets), assets=[]), now=NOW)
    assert out["status"] == "no_input"


def test_pipeline_rejects_bad_request():
    with pytest.raises(InvalidRequest):
        run_pipeline({"risk_level": "neutral"})


def test_pipeline_rejects_unknown_risk_level(markets):
    with pytest.raises(InvalidRequest):
        run_pipeline(_payload(markets, risk_level="yolo"), now=NOW)


def test_pipeline_unusable_markets_is_no_match():
    # Records without address or expiry are dropped by the transformer.
    broken = [{"name": "PT-USDC-X", "expiry": "2099-01-01T00:00:00Z"}, {"address": "0x9", "name": "PT-USDC-Y"}]
    out = run_pipeline(_payload(broken), now=NOW)
    assert out["status"] == "no_match"
    assert out["pool_count"] == 0
    assert out["recommendations"] == []


def test_pipeline_stablecoin_filter_leaving_nothing_is_no_match(make_market):
    weth = make_market("0x7", "PT-WETH-X", "0x" + "3" * 40, details={"totalTvl": 1})
    out = run_pipeline(_payload([weth], stablecoin_only=True), now=NOW)
    assert out["status"] == "no_match"
    assert out["stablecoin_ranking"] == []


def test_pipeline_empty_market_list_stays_no_input():
    out = run_pipeline(_payload([]), now=NOW)
    assert out["status"] == "no_input"


def test_pipeline_stablecoin_only_ranks_by_stablecoin_score(markets):
    out = run_pipeline(_payload(markets, stablecoin_only=True), now=NOW)
    ranking = out["stablecoin_ranking"]
    assert [r["rank"] for r in ranking] == [1, 2]
    assert ranking[0]["pool"]["name"] == "PT-sUSDe-26MAR2027"
    assert ranking[0]["stablecoin_score"] > ranking[1]["stablecoin_score"]
    assert "stablecoin_ranking" not in run_pipeline(_payload(markets), now=NOW)


def test_pipeline_oversized_feed_apy_stays_json_safe(make_market):
    huge = make_market("0x00000000000000000000000000000000000000c3", "PT-USDC-HUGE", USDC_ADDR,
                       details={"aggregatedApy": 1e308, "impliedApy": 1e308, "totalTvl": 1_000_000})
    out = run_pipeline(_payload([huge]), now=NOW)
    assert out["status"] == "ok"
    assert out["recommendations"][0]["pool"]["apy"] == pytest.approx(10.0)
    json.dumps(out, allow_nan=False)
