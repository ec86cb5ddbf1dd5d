"""Tests for the GeckoTerminal pool provider."""

import httpx
import pytest
import respx

from sentinel.data.geckoterminal import (
    GeckoTerminalPoolSource,
    map_geckoterminal_pool_to_pool,
)

BASE_URL = "https://api.geckoterminal.com"
TOKEN_IN = "0x" + "a" * 40
TOKEN_OUT = "0x" + "b" * 40
OTHER = "0x" + "c" * 40


def make_entry(base=TOKEN_IN, quote=TOKEN_OUT, **attributes):
    entry = {
        "id": "base_0xpool",
        "type": "pool",
        "attributes": {
            "address": "0xpool",
            "base_token": {"address": base, "symbol": "WETH"},
            "quote_token": {"address": quote, "symbol": "USDC"},
            "base_token_price_usd": "2000.5",
            "reserve_in_usd": "250000.75",
            "price_change_percentage_24h": "-3.2",
        },
        "relationships": {"dex": {"data": {"id": "aerodrome-base", "type": "dex"}}},
    }
    entry["attributes"].update(attributes)
    return entry


@pytest.fixture
def source():
    """GeckoTerminal source without retries."""
    return GeckoTerminalPoolSource(
        base_url=BASE_URL, session=httpx.AsyncClient(), max_attempts=1
    )


class TestMapping:
    """Test GeckoTerminal pool mapping."""

    def test_map_full_entry(self):
        """Test mapping of a complete pool resource."""
        pool = map_geckoterminal_pool_to_pool(make_entry(), network="base")

        assert pool.pair_address == "0xpool"
        assert pool.base_token.address == TOKEN_IN
        assert pool.quote_token.symbol == "USDC"
        assert pool.price_usd == 2000.5
        assert pool.liquidity.usd == 250000.75
        assert pool.price_change.h24 == -3.2
        assert pool.chain_id == "base"
        assert pool.dex_id == "aerodrome-base"
        assert pool.source == "geckoterminal"

    def test_map_sparse_entry(self):
        """Test sparse resources map to zeros and Nones."""
        pool = map_geckoterminal_pool_to_pool({"attributes": None})

        assert pool.base_token is None
        assert pool.price_usd == 0.0
        assert pool.liquidity.usd == 0.0
        assert pool.price_change.h24 == 0.0
        assert pool.dex_id is None


class TestGeckoTerminalPoolSource:
    """Test GeckoTerminal pool fetching."""

    def test_init(self, source):
        """Test initialization."""
        assert source.base_url == BASE_URL
        assert source.name == "geckoterminal"
        assert source.network_aliases["ethereum"] == "eth"

    def test_build_endpoint(self, source):
        """Test network-scoped paths."""
        assert source.build_endpoint(None) is None
        assert source.build_endpoint("matic") == ("api/v2/networks/polygon/pools", "polygon")
        assert source.build_endpoint("ethereum/0xpool") == (
            "api/v2/networks/eth/pools/0xpool",
            "eth",
        )
        assert source.build_endpoint("/0xpool") is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_without_hint_skips_request(self, source):
        """Test no request is made without a network."""
        assert await source.fetch_pools(TOKEN_IN, TOKEN_OUT) == []
        assert len(respx.calls) == 0

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_filters_pair(self, source):
        """Test only the requested pair is kept, in either order."""
        route = respx.get(f"{BASE_URL}/api/v2/networks/eth/pools").mock(
            return_value=httpx.Response(
                200,
                json={
                    "data": [
                        make_entry(address="0x1"),
                        make_entry(base=TOKEN_OUT, quote=TOKEN_IN, address="0x2"),
                        make_entry(quote=OTHER, address="0x3"),
                    ]
                },
            )
        )

        pools = await source.fetch_pools(TOKEN_IN, TOKEN_OUT, "ethereum")

        assert [p.pair_address for p in pools] == ["0x1", "0x2"]
        assert all(p.chain_id == "eth" for p in pools)
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_single_pool(self, source):
        """Test pair hints use the single-pool endpoint."""
        respx.get(f"{BASE_URL}/api/v2/networks/base/pools/0xpool").mock(
            return_value=httpx.Response(200, json={"data": make_entry()})
        )

        pools = await source.fetch_pools(TOKEN_IN, TOKEN_OUT, "base/0xpool")

        assert len(pools) == 1
        assert pools[0].chain_id == "base"

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_error_status_returns_empty(self, source):
        """Test non-success statuses are soft failures."""
        respx.get(f"{BASE_URL}/api/v2/networks/base/pools").mock(
            return_value=httpx.Response(503)
        )

        assert await source.fetch_pools(TOKEN_IN, TOKEN_OUT, "base") == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_timeout_returns_empty(self, source):
        """Test timeouts are absorbed."""
        respx.get(f"{BASE_URL}/api/v2/networks/base/pools").mock(
            side_effect=httpx.ReadTimeout
        )

        assert await source.fetch_pools(TOKEN_IN, TOKEN_OUT, "base") == []
