"""Core interfaces for the slippage estimator."""

from typing import Protocol, runtime_checkable

from .types import NormalizedPool


@runtime_checkable
class PoolProvider(Protocol):
    """Liquidity pool data provider protocol."""

    name: str

    async def fetch_pools(
        self, token_in: str, token_out: str, route_hint: str | None = None
    ) -> list[NormalizedPool]:
        """Fetch pools trading the token pair, empty if none are found."""
        ...
