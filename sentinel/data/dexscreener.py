"""DexScreener pool data provider."""

from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from ..config.chains import DEXSCREENER_CHAIN_ALIASES
from ..core.interfaces import PoolProvider
from ..core.types import NormalizedPool, PoolLiquidity, PriceChange
from .http import DEFAULT_USER_AGENT, HttpPoolSource
from .parsing import matches_pair, parse_or_zero, parse_route_hint, parse_token

logger = structlog.get_logger(__name__)


def map_dexscreener_pair_to_pool(
    pair: Mapping[str, Any], source: str = "dexscreener"
) -> NormalizedPool:
    """Map one DexScreener pair object to a NormalizedPool.

    Args:
        pair: Raw pair object from a ``pairs`` array
        source: Data source identifier

    Returns:
        NormalizedPool with numeric fields coerced to finite floats
    """
    liquidity = pair.get("liquidity") or {}
    price_change = pair.get("priceChange") or {}
    chain_id = pair.get("chainId")

    return NormalizedPool(
        pair_address=pair.get("pairAddress"),
        base_token=parse_token(pair.get("baseToken")),
        quote_token=parse_token(pair.get("quoteToken")),
        price_usd=parse_or_zero(pair.get("priceUsd")),
        liquidity=PoolLiquidity(usd=parse_or_zero(liquidity.get("usd"))),
        price_change=PriceChange(h24=parse_or_zero(price_change.get("h24"))),
        chain_id=chain_id.lower() if isinstance(chain_id, str) else None,
        dex_id=pair.get("dexId"),
        source=source,
    )


class DexScreenerPoolSource(HttpPoolSource, PoolProvider):
    """DexScreener API pool provider (token and pair lookups)."""

    name = "dexscreener"

    def __init__(
        self,
        base_url: str,
        session: httpx.AsyncClient | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float | None = 30.0,
        max_attempts: int = 2,
        chain_aliases: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize DexScreener pool source.

        Args:
            base_url: DexScreener API base URL
            session: Optional httpx client session
            user_agent: User-Agent header sent with every request
            timeout: Per-request timeout in seconds
            max_attempts: Attempts per request on network errors
            chain_aliases: Chain alias table, defaults to DexScreener chain ids
        """
        super().__init__(
            base_url,
            session=session,
            user_agent=user_agent,
            timeout=timeout,
            max_attempts=max_attempts,
        )
        self.chain_aliases = (
            DEXSCREENER_CHAIN_ALIASES if chain_aliases is None else chain_aliases
        )

    def build_endpoint(self, token_in: str, route_hint: str | None = None) -> str:
        """Build the lookup path for a token or an explicit pair hint."""
        hint = parse_route_hint(route_hint, self.chain_aliases)
        if hint.pair_path:
            return f"latest/dex/pairs/{hint.pair_path}"
        return f"latest/dex/tokens/{token_in}"

    async def fetch_pools(
        self, token_in: str, token_out: str, route_hint: str | None = None
    ) -> list[NormalizedPool]:
        """Fetch DexScreener pairs trading token_in against token_out.

        Args:
            token_in: Address of the token sold
            token_out: Address of the token bought
            route_hint: Optional chain id or ``chain/pairAddress`` locator

        Returns:
            Matching pools, empty on no match or upstream failure
        """
        hint = parse_route_hint(route_hint, self.chain_aliases)
        endpoint = self.build_endpoint(token_in, route_hint)

        data = await self._get_json(endpoint)
        if not isinstance(data, Mapping):
            return []

        pairs = data.get("pairs")
        # Older pair lookups answer with a single "pair" object
        if pairs is None and isinstance(data.get("pair"), Mapping):
            pairs = [data["pair"]]

        pools = []
        for pair in pairs or []:
            if not isinstance(pair, Mapping):
                continue
            pool = map_dexscreener_pair_to_pool(pair, source=self.name)
            if hint.chain and pool.chain_id != hint.chain:
                continue
            if not matches_pair(pool.base_token, pool.quote_token, token_in, token_out):
                continue
            pools.append(pool)

        logger.info(
            "Fetched DexScreener pools",
            endpoint=endpoint,
            chain=hint.chain,
            count=len(pools),
        )
        return pools
