"""Per-pool slippage estimation heuristic."""

import math
from decimal import ROUND_HALF_UP, Decimal

from ..config.settings import EstimatorConfig

DEFAULT_ESTIMATOR_CONFIG = EstimatorConfig()

CENTS = Decimal("0.01")


def round_cents(value: float) -> float:
    """Round to two decimals, ties away from zero.

    Rounds the exact binary value of the float, so ``0.125`` becomes ``0.13``
    while ``1.005`` (stored just below the tie) becomes ``1.0``.
    Non-finite values are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    return float(Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP))


def estimate_pool_slippage_bps(
    trade_amount_usd: float,
    pool_depth_usd: float,
    volatility_pct: float,
    config: EstimatorConfig = DEFAULT_ESTIMATOR_CONFIG,
) -> int:
    """Estimate a safe slippage tolerance for one pool.

    The estimate is a linear heuristic: price impact from trade size over
    pool depth (capped), plus a fraction of the 24h price move, plus a fixed
    fee overhead. The total is capped in percent, then bounded in bps.

    Args:
        trade_amount_usd: Trade notional in USD
        pool_depth_usd: Pool liquidity in USD
        volatility_pct: Absolute 24h price change in percent
        config: Heuristic bounds and constants

    Returns:
        Slippage tolerance in basis points within
        ``[config.min_slippage_bps, config.max_slippage_bps]``
    """
    # +1 keeps the ratio finite for empty pools
    depth_ratio = trade_amount_usd / (pool_depth_usd + 1)
    price_impact_pct = min(max(depth_ratio, 0.0) * 100, config.max_price_impact_pct)

    volatility_adj_pct = abs(volatility_pct) / config.volatility_divisor

    final_pct = min(
        price_impact_pct + volatility_adj_pct + config.fee_overhead_pct,
        config.max_total_slippage_pct,
    )

    safe_bps = max(math.ceil(final_pct * 100), config.min_slippage_bps)
    return min(safe_bps, config.max_slippage_bps)


def trade_size_p95(
    trade_amount_usd: float, config: EstimatorConfig = DEFAULT_ESTIMATOR_CONFIG
) -> float:
    """Return the p95 trade-size proxy, rounded to cents."""
    return round_cents(trade_amount_usd * config.trade_p95_factor)
