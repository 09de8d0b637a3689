from datetime import datetime, timezone

import pytest

from navigator.pool_transformer import transform_markets
from navigator.tools import pool_scoring

NOW = 1_700_000_000
USDC_ADDR = "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913"
SUSDE_ADDR = "0x211cc4dd073734da055fbf44a2b4667d5e5fe5d2"


def _expiry(days, now=NOW):
    return datetime.fromtimestamp(now + days * 86400, tz=timezone.utc).isoformat()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_market():
    """Raw market record in the feed's camelCase shape."""
    def _make(address, name, underlying, days=100, details=None, expiry=None):
        rec = {
            "address": address,
            "name": name,
            "expiry": expiry or _expiry(days),
            "underlyingAsset": f"8453-{underlying}",
        }
        if details is not None:
            rec["details"] = details
        return rec
    return _make


@pytest.fixture
def markets(make_market):
    return [
        make_market(
            "0x00000000000000000000000000000000000000a1", "PT-USDC-26MAR2027", USDC_ADDR,
            details={"aggregatedApy": 0.12, "impliedApy": 0.11, "totalTvl": 5_000_000},
        ),
        make_market(
            "0x00000000000000000000000000000000000000b2", "PT-sUSDe-26MAR2027", SUSDE_ADDR,
            days=200, details={"aggregatedApy": 0.18, "impliedApy": 0.15, "totalTvl": 20_000_000},
        ),
    ]


@pytest.fixture
def pools(markets, now):
    return transform_markets(markets, now=now)


@pytest.fixture(autouse=True)
def _fresh_scorer(monkeypatch):
    """Each test starts from the default scorer and fuzzy matching."""
    monkeypatch.delenv("SCORER_MODULE", raising=False)
    monkeypatch.delenv("MATCH_MODE", raising=False)
    monkeypatch.delenv("USE_XRAY", raising=False)
    monkeypatch.setenv("SESSION_STORE", "memory")
    pool_scoring.reset_scorer()
    yield
    pool_scoring.reset_scorer()
