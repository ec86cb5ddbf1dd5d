"""Core data types for the slippage estimator."""

from pydantic import BaseModel, Field, field_validator


class ErrorMessages:
    """Error strings returned in the ``error`` field of a response."""

    INVALID_TOKEN_ADDRESS = "Invalid token address format"
    NO_POOLS_FOUND = "No matching liquidity pool found for this token pair."
    INVALID_AMOUNT = "Invalid amount: must be a positive number"
    CALCULATION_FAILED = "Failed to calculate safe slippage"


class TokenRef(BaseModel):
    """Token reference as reported by a pool provider."""

    address: str = Field(description="Token contract address")
    symbol: str | None = Field(default=None, description="Token ticker symbol")


class PoolLiquidity(BaseModel):
    """Pool liquidity figures."""

    usd: float = Field(default=0.0, description="Total value locked in USD")


class PriceChange(BaseModel):
    """Pool price change figures."""

    h24: float | None = Field(
        default=None, description="24h price change in percent (signed)"
    )


class NormalizedPool(BaseModel):
    """Provider-agnostic view of one liquidity pool."""

    pair_address: str | None = Field(default=None, description="Pool address")
    base_token: TokenRef | None = Field(default=None, description="Base token")
    quote_token: TokenRef | None = Field(default=None, description="Quote token")
    price_usd: float = Field(default=0.0, description="Base token price in USD")
    liquidity: PoolLiquidity = Field(default_factory=PoolLiquidity)
    price_change: PriceChange = Field(default_factory=PriceChange)
    chain_id: str | None = Field(default=None, description="Chain identifier")
    dex_id: str | None = Field(default=None, description="DEX identifier")
    source: str = Field(default="unknown", description="Data source identifier")


class PoolMetrics(BaseModel):
    """Worst-case metrics across the eligible pools of one request."""

    max_safe_slip_bps: int = Field(description="Largest per-pool safe slippage")
    max_pool_depth: float = Field(description="Largest pool liquidity in USD")
    max_trade_p95: float = Field(description="Largest p95 trade-size proxy in USD")
    max_volatility: float = Field(description="Largest absolute 24h price change")


class SafeSlippageInput(BaseModel):
    """Input of the safe slippage entrypoint."""

    model_config = {"allow_inf_nan": False}

    token_in: str = Field(min_length=1, description="Address of the token sold")
    token_out: str = Field(min_length=1, description="Address of the token bought")
    amount_in: float = Field(gt=0, description="Amount to trade, number or string")
    route_hint: str | None = Field(
        default=None, description="Chain id (e.g. 'base') or 'chain/pairAddress'"
    )

    @field_validator("route_hint")
    @classmethod
    def blank_hint_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class SafeSlippageResult(BaseModel):
    """Successful slippage recommendation."""

    min_safe_slip_bps: int
    pool_depths: float
    recent_trade_size_p95: float
    volatility_index: float


class SafeSlippageError(BaseModel):
    """Failed slippage request."""

    error: str


class ValidInput(BaseModel):
    """Input that passed boundary validation."""

    input: SafeSlippageInput


class InvalidInput(BaseModel):
    """Input that failed boundary validation."""

    reason: str
