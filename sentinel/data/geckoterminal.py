"""GeckoTerminal pool data provider."""

from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from ..config.chains import GECKOTERMINAL_NETWORK_ALIASES, ROUTE_HINT_SEPARATOR
from ..core.interfaces import PoolProvider
from ..core.types import NormalizedPool, PoolLiquidity, PriceChange
from .http import DEFAULT_USER_AGENT, HttpPoolSource
from .parsing import (
    matches_pair,
    parse_or_zero,
    parse_route_hint,
    parse_token,
    resolve_chain,
)

logger = structlog.get_logger(__name__)


def map_geckoterminal_pool_to_pool(
    entry: Mapping[str, Any], network: str | None = None, source: str = "geckoterminal"
) -> NormalizedPool:
    """Map one GeckoTerminal pool resource to a NormalizedPool.

    Args:
        entry: Raw JSON:API resource with ``attributes``
        network: Network the pool was listed under
        source: Data source identifier

    Returns:
        NormalizedPool with numeric fields coerced to finite floats
    """
    attributes = entry.get("attributes") or {}
    relationships = entry.get("relationships") or {}
    dex = (relationships.get("dex") or {}).get("data") or {}

    return NormalizedPool(
        pair_address=attributes.get("address"),
        base_token=parse_token(attributes.get("base_token")),
        quote_token=parse_token(attributes.get("quote_token")),
        price_usd=parse_or_zero(attributes.get("base_token_price_usd")),
        liquidity=PoolLiquidity(usd=parse_or_zero(attributes.get("reserve_in_usd"))),
        price_change=PriceChange(
            h24=parse_or_zero(attributes.get("price_change_percentage_24h"))
        ),
        chain_id=network,
        dex_id=dex.get("id"),
        source=source,
    )


class GeckoTerminalPoolSource(HttpPoolSource, PoolProvider):
    """GeckoTerminal API pool provider (network-scoped pool listings)."""

    name = "geckoterminal"

    def __init__(
        self,
        base_url: str,
        session: httpx.AsyncClient | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float | None = 30.0,
        max_attempts: int = 2,
        network_aliases: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize GeckoTerminal pool source.

        Args:
            base_url: GeckoTerminal API base URL
            session: Optional httpx client session
            user_agent: User-Agent header sent with every request
            timeout: Per-request timeout in seconds
            max_attempts: Attempts per request on network errors
            network_aliases: Network alias table, defaults to GeckoTerminal ids
        """
        super().__init__(
            base_url,
            session=session,
            user_agent=user_agent,
            timeout=timeout,
            max_attempts=max_attempts,
        )
        self.network_aliases = (
            GECKOTERMINAL_NETWORK_ALIASES
            if network_aliases is None
            else network_aliases
        )

    def build_endpoint(self, route_hint: str | None) -> tuple[str, str] | None:
        """Build the pool listing path and its network.

        Returns:
            ``(endpoint, network)``, or None when the hint names no network
        """
        hint = parse_route_hint(route_hint, self.network_aliases)
        if hint.chain:
            return f"api/v2/networks/{hint.chain}/pools", hint.chain
        if hint.pair_path:
            chain, _, pool_address = hint.pair_path.partition(ROUTE_HINT_SEPARATOR)
            if not chain.strip() or not pool_address.strip():
                return None
            network = resolve_chain(chain, self.network_aliases)
            return f"api/v2/networks/{network}/pools/{pool_address.strip()}", network
        return None

    async def fetch_pools(
        self, token_in: str, token_out: str, route_hint: str | None = None
    ) -> list[NormalizedPool]:
        """Fetch GeckoTerminal pools trading token_in against token_out.

        Args:
            token_in: Address of the token sold
            token_out: Address of the token bought
            route_hint: Chain id or ``chain/poolAddress`` locator

        Returns:
            Matching pools, empty on no match, no network, or upstream failure
        """
        target = self.build_endpoint(route_hint)
        if target is None:
            logger.info("GeckoTerminal skipped, no network in route hint")
            return []
        endpoint, network = target

        data = await self._get_json(endpoint)
        if not isinstance(data, Mapping):
            return []

        entries = data.get("data") or []
        # Single-pool lookups return one resource instead of a list
        if isinstance(entries, Mapping):
            entries = [entries]

        pools = []
        for entry in entries:
            if not isinstance(entry, Mapping):
                continue
            pool = map_geckoterminal_pool_to_pool(entry, network=network, source=self.name)
            if not matches_pair(pool.base_token, pool.quote_token, token_in, token_out):
                continue
            pools.append(pool)

        logger.info(
            "Fetched GeckoTerminal pools",
            endpoint=endpoint,
            network=network,
            count=len(pools),
        )
        return pools
