from navigator.constants.strategy_tags import RISKY

LOW_TVL_USD = 1_000_000
SHORT_MATURITY_DAYS = 14
LONG_MATURITY_DAYS = 180


def risks_for(pool, result):
    """Plain-language caveats for one scored pool."""
    risks = []
    pt = result["allocation"]["pt"]
    yt = result["allocation"]["yt"]

    if pt > 0:
        risks.append("PT return is fixed at purchase; no upside if the APY rises")
    if yt > 0:
        risks.append("YT value depends on the floating APY and goes to zero at maturity")
    if yt >= 70:
        risks.append("High risk: losses if the underlying APY falls")

    if pool.days_to_maturity == 0:
        risks.append("Market has matured; only redemption is possible")
    elif pool.days_to_maturity < SHORT_MATURITY_DAYS:
        risks.append(f"Matures in {pool.days_to_maturity} days; little time to collect yield")
    elif pool.days_to_maturity > LONG_MATURITY_DAYS:
        risks.append(f"Capital is committed for {pool.days_to_maturity} days")

    if pool.tvl < LOW_TVL_USD:
        risks.append(f"Thin liquidity (TVL ${pool.tvl:,.0f}); expect slippage on entry and exit")
    if pool.strategy_tag == RISKY:
        risks.append(f"Flagged risky: PT discount {pool.pt_discount:.1%}, APY {pool.apy:.1f}%")
    return risks
