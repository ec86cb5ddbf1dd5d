"""Pool metrics analysis."""

import math
from collections.abc import Iterable

import structlog

from ..config.settings import EstimatorConfig
from ..core.types import NormalizedPool, PoolMetrics
from .estimator import (
    DEFAULT_ESTIMATOR_CONFIG,
    estimate_pool_slippage_bps,
    trade_size_p95,
)

logger = structlog.get_logger(__name__)


def is_eligible(pool: NormalizedPool) -> bool:
    """Return True if the pool has a finite, positive USD depth."""
    depth = pool.liquidity.usd
    return math.isfinite(depth) and depth > 0


def analyze_pool_metrics(
    pools: Iterable[NormalizedPool],
    trade_amount_usd: float,
    config: EstimatorConfig = DEFAULT_ESTIMATOR_CONFIG,
) -> PoolMetrics:
    """Reduce pools to the most cautious metrics observed across them.

    Every field is a pointwise maximum over eligible pools, so the
    recommendation covers the riskiest venue rather than the average one.

    Args:
        pools: Normalized pools for the requested pair
        trade_amount_usd: Trade notional in USD
        config: Heuristic bounds and constants

    Returns:
        PoolMetrics; the floor values when no pool is eligible
    """
    max_safe_slip_bps = config.min_slippage_bps
    max_pool_depth = 0.0
    max_trade_p95 = 0.0
    max_volatility = 0.0
    skipped = 0

    for pool in pools:
        if not is_eligible(pool):
            skipped += 1
            continue

        depth = pool.liquidity.usd
        h24 = pool.price_change.h24
        volatility = abs(h24) if h24 is not None and math.isfinite(h24) else 0.0

        safe_bps = estimate_pool_slippage_bps(
            trade_amount_usd, depth, volatility, config
        )
        trade_p95 = trade_size_p95(trade_amount_usd, config)

        max_safe_slip_bps = max(max_safe_slip_bps, safe_bps)
        max_pool_depth = max(max_pool_depth, depth)
        max_trade_p95 = max(max_trade_p95, trade_p95)
        if volatility > max_volatility:
            max_volatility = volatility

    if skipped:
        logger.debug("Skipped pools without usable liquidity", skipped=skipped)

    return PoolMetrics(
        max_safe_slip_bps=max_safe_slip_bps,
        max_pool_depth=max_pool_depth,
        max_trade_p95=max_trade_p95,
        max_volatility=max_volatility,
    )
