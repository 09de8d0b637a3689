import pytest

from navigator.pool_transformer import (
    parse_expiry, days_until, symbol_from_name, estimate_prices, strategy_tag,
    transform_markets, filter_stablecoin_pools,
)

from conftest import NOW, USDC_ADDR


def test_parse_expiry_accepts_z_and_naive():
    assert parse_expiry("2023-11-14T22:13:20Z") == NOW
    assert parse_expiry("2023-11-14T22:13:20") == NOW
    assert parse_expiry("not a date") == 0
    assert parse_expiry(None) == 0


def test_days_until_rounds_up_and_clamps():
    assert days_until(NOW + 86400 * 2 + 1, NOW) == 3
    assert days_until(NOW - 10, NOW) == 0


def test_symbol_from_name():
    assert symbol_from_name("PT-sUSDe-26DEC2024") == "sUSDe"
    assert symbol_from_name("USDC") == "USDC"
    assert symbol_from_name(None) == "UNKNOWN"


def test_estimate_prices_defaults_without_time_or_yield():
    assert estimate_prices(0.1, 0) == (0.95, 0.05)
    assert estimate_prices(0.0, 100) == (0.95, 0.05)


def test_estimate_prices_are_clamped():
    pt, yt = estimate_prices(5.0, 365)
    assert pt == 0.5
    assert yt == 0.5


def test_usdc_market_end_to_end(pools):
    pool = pools[0]
    assert pool.underlying_asset.symbol == "USDC"
    assert pool.underlying_asset.address == USDC_ADDR
    assert pool.underlying_asset.chain_id == 8453
    assert pool.days_to_maturity == 100
    assert pool.apy == pytest.approx(12.0)
    assert pool.implied_yield == pytest.approx(11.0)
    assert pool.pt_price == pytest.approx(1 - 0.11 * 100 / 365)
    assert pool.yt_price == pytest.approx(0.11 * 100 / 365)
    assert pool.pt_discount == pytest.approx(1 - pool.pt_price)
    assert pool.tvl == 5_000_000
    assert pool.strategy_tag == "Neutral"


def test_past_expiry_clamps_to_zero_days(make_market):
    m = make_market("0x1", "PT-USDC-01JAN2020", USDC_ADDR, expiry="2020-01-01T00:00:00Z",
                    details={"aggregatedApy": 0.12})
    pool = transform_markets([m], now=NOW)[0]
    assert pool.days_to_maturity == 0
    assert pool.pt_price == 0.95
    assert pool.yt_price == 0.05


def test_missing_details_use_defaults(make_market):
    pool = transform_markets([make_market("0x2", "PT-cUSD-X", USDC_ADDR)], now=NOW)[0]
    assert pool.apy == pytest.approx(10.0)
    assert pool.implied_yield == pytest.approx(10.5)
    assert pool.tvl == 0


def test_underlying_apy_used_when_aggregated_missing(make_market):
    m = make_market("0x3", "PT-USDC-X", USDC_ADDR, details={"underlyingApy": 0.07, "liquidity": 1000})
    pool = transform_markets([m], now=NOW)[0]
    assert pool.apy == pytest.approx(7.0)
    assert pool.implied_yield == pytest.approx(7.35)
    assert pool.tvl == 1000


def test_pool_details_backfill(make_market):
    m = make_market("0xABC", "PT-USDC-X", USDC_ADDR)
    extra = [{"market": "0xabc", "details": {"aggregatedApy": 0.2, "totalTvl": 42}}]
    pool = transform_markets([m], pool_details=extra, now=NOW)[0]
    assert pool.apy == pytest.approx(20.0)
    assert pool.tvl == 42


def test_records_without_address_or_expiry_are_skipped(make_market):
    good = make_market("0x4", "PT-USDC-X", USDC_ADDR)
    no_addr = dict(good, address="")
    no_expiry = {k: v for k, v in good.items() if k != "expiry"}
    pools = transform_markets([no_addr, good, "junk", no_expiry], now=NOW)
    assert [p.address for p in pools] == ["0x4"]


def test_transform_rejects_non_list():
    with pytest.raises(TypeError):
        transform_markets({"markets": []})


def test_strategy_tag_on_fraction_scale_input_stays_neutral():
    assert strategy_tag(0.10, 0.18, 0.05, 100) == "Neutral"


def test_strategy_tag_percent_scale_best_pt():
    assert strategy_tag(10, 18, 0.05, 100) == "Best PT"


def test_strategy_tag_percent_scale_best_yt():
    assert strategy_tag(25, 20, 0.01, 90) == "Best YT"
    assert strategy_tag(25, 20, 0.01, 30) == "Neutral"


def test_strategy_tag_risky():
    assert strategy_tag(0.1, 0.1, 0.12, 100) == "Risky"
    assert strategy_tag(35, 30, 0.0, 10) == "Risky"


def test_filter_stablecoin_pools(pools, make_market):
    eth = transform_markets([make_market("0x5", "PT-WETH-X", "0x" + "1" * 40)], now=NOW)
    kept = filter_stablecoin_pools(pools + eth)
    assert [p.underlying_asset.symbol for p in kept] == ["USDC", "sUSDe"]


def test_oversized_rates_count_as_missing(make_market):
    m = make_market("0x4", "PT-USDC-X", USDC_ADDR,
                    details={"aggregatedApy": 1e308, "underlyingApy": 0.07, "impliedApy": 5e3})
    pool = transform_markets([m], now=NOW)[0]
    assert pool.apy == pytest.approx(7.0)
    assert pool.implied_yield == pytest.approx(7.35)
