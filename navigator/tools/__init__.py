# Re-export tool modules so `from navigator import tools; tools.market_feed...` works.
from . import market_feed, pool_scoring, risk_alerts
