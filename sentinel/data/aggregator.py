"""Ordered pool provider aggregation with fallback."""

from collections.abc import Sequence

import structlog

from ..core.interfaces import PoolProvider
from ..core.types import NormalizedPool

logger = structlog.get_logger(__name__)


class PoolAggregator:
    """Query providers in priority order until one returns pools."""

    def __init__(self, providers: Sequence[PoolProvider]) -> None:
        """Initialize pool aggregator.

        Args:
            providers: Pool providers, highest priority first
        """
        if not providers:
            raise ValueError("PoolAggregator requires at least one provider")
        self.providers = list(providers)

    async def fetch_pools(
        self, token_in: str, token_out: str, route_hint: str | None = None
    ) -> list[NormalizedPool]:
        """Return pools from the first provider that finds any.

        Providers are called sequentially; the rest are skipped once one
        yields a non-empty result. Results are never merged.

        Args:
            token_in: Address of the token sold
            token_out: Address of the token bought
            route_hint: Optional chain id or pair locator

        Returns:
            Pools from a single provider, or an empty list
        """
        for provider in self.providers:
            pools = await provider.fetch_pools(token_in, token_out, route_hint)
            if pools:
                logger.info(
                    "Pools found",
                    provider=provider.name,
                    count=len(pools),
                    route_hint=route_hint,
                )
                return pools

            logger.info(
                "No pools from provider, falling back",
                provider=provider.name,
                route_hint=route_hint,
            )

        return []
