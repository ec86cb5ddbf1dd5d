"""Chain name aliases for pool data providers."""

# Route hints may name a chain either way; each provider embeds its own id.
ROUTE_HINT_SEPARATOR = "/"

GECKOTERMINAL_NETWORK_ALIASES: dict[str, str] = {
    "eth": "eth",
    "ethereum": "eth",
    "bsc": "bsc",
    "binance-smart-chain": "bsc",
    "polygon": "polygon",
    "matic": "polygon",
    "arbitrum": "arbitrum",
    "optimism": "optimism",
    "base": "base",
    "avalanche": "avax",
    "avax": "avax",
    "fantom": "ftm",
    "ftm": "ftm",
}

DEXSCREENER_CHAIN_ALIASES: dict[str, str] = {
    "eth": "ethereum",
    "ethereum": "ethereum",
    "bsc": "bsc",
    "binance-smart-chain": "bsc",
    "polygon": "polygon",
    "matic": "polygon",
    "arbitrum": "arbitrum",
    "optimism": "optimism",
    "base": "base",
    "avalanche": "avalanche",
    "avax": "avalanche",
    "fantom": "fantom",
    "ftm": "fantom",
}
