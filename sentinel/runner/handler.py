"""Safe slippage entrypoint handler."""

from collections.abc import Mapping
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from ..config.settings import AppSettings, EstimatorConfig, payments_enabled
from ..core.types import (
    ErrorMessages,
    InvalidInput,
    SafeSlippageError,
    SafeSlippageInput,
    SafeSlippageResult,
    ValidInput,
)
from ..data.aggregator import PoolAggregator
from ..data.dexscreener import DexScreenerPoolSource
from ..data.geckoterminal import GeckoTerminalPoolSource
from ..data.parsing import is_valid_address
from ..risk.analyzer import analyze_pool_metrics
from ..risk.estimator import DEFAULT_ESTIMATOR_CONFIG, round_cents

logger = structlog.get_logger(__name__)

ENTRYPOINT_KEY = "getSafeSlippage"


def validate_input(payload: Mapping[str, Any]) -> ValidInput | InvalidInput:
    """Validate a raw request payload at the boundary.

    Args:
        payload: Decoded request body

    Returns:
        ValidInput with the parsed input, or InvalidInput with a reason
    """
    try:
        return ValidInput(input=SafeSlippageInput.model_validate(payload))
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(part) for part in first["loc"]) or "input"
        if loc == "amount_in":
            return InvalidInput(reason=ErrorMessages.INVALID_AMOUNT)
        return InvalidInput(reason=f"Invalid input: {loc}: {first['msg']}")


def _response(output: SafeSlippageResult | SafeSlippageError) -> dict[str, Any]:
    return {"output": output.model_dump()}


def _error(message: str) -> dict[str, Any]:
    return _response(SafeSlippageError(error=message))


class SafeSlippageHandler:
    """Estimate safe slippage for a swap from aggregated pool data."""

    def __init__(
        self,
        aggregator: PoolAggregator,
        config: EstimatorConfig = DEFAULT_ESTIMATOR_CONFIG,
        session: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize handler.

        Args:
            aggregator: Pool aggregator used to look up venues
            config: Heuristic bounds and constants
            session: HTTP session owned by the handler, closed by aclose()
        """
        self.aggregator = aggregator
        self.config = config
        self._owned_session = session

    async def handle(self, request: SafeSlippageInput) -> dict[str, Any]:
        """Produce a slippage recommendation for validated input.

        Business failures are returned as ``{"output": {"error": ...}}``;
        this method does not raise.

        Args:
            request: Schema-validated entrypoint input

        Returns:
            ``{"output": ...}`` with either the result fields or ``error``
        """
        for field in ("token_in", "token_out"):
            if not is_valid_address(getattr(request, field)):
                return _error(f"{ErrorMessages.INVALID_TOKEN_ADDRESS}: {field}")

        try:
            pools = await self.aggregator.fetch_pools(
                request.token_in, request.token_out, request.route_hint
            )
            if not pools:
                logger.info(
                    "No pools found",
                    token_in=request.token_in,
                    token_out=request.token_out,
                    route_hint=request.route_hint,
                )
                return _error(ErrorMessages.NO_POOLS_FOUND)

            # The first pool is the price reference for the whole trade
            trade_amount_usd = request.amount_in * pools[0].price_usd

            metrics = analyze_pool_metrics(pools, trade_amount_usd, self.config)
        except Exception as e:
            logger.exception(
                "Safe slippage calculation failed",
                token_in=request.token_in,
                token_out=request.token_out,
                error=str(e),
            )
            return _error(f"{ErrorMessages.CALCULATION_FAILED}: {e}")

        result = SafeSlippageResult(
            min_safe_slip_bps=metrics.max_safe_slip_bps,
            pool_depths=round_cents(metrics.max_pool_depth),
            recent_trade_size_p95=metrics.max_trade_p95,
            volatility_index=round_cents(metrics.max_volatility),
        )

        logger.info(
            "Safe slippage estimated",
            token_in=request.token_in,
            token_out=request.token_out,
            pools=len(pools),
            source=pools[0].source,
            trade_amount_usd=trade_amount_usd,
            min_safe_slip_bps=result.min_safe_slip_bps,
        )
        return _response(result)

    async def handle_payload(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        """Validate a raw payload, then handle it."""
        validated = validate_input(payload)
        if isinstance(validated, InvalidInput):
            logger.info("Rejected invalid input", reason=validated.reason)
            return _error(validated.reason)
        return await self.handle(validated.input)

    async def aclose(self) -> None:
        """Close the HTTP session if this handler created it."""
        if self._owned_session is not None:
            await self._owned_session.aclose()
            self._owned_session = None


def build_handler(
    settings: AppSettings, session: httpx.AsyncClient | None = None
) -> SafeSlippageHandler:
    """Assemble the provider chain and handler from settings.

    Args:
        settings: Application settings
        session: Optional shared HTTP session; created (and owned) if omitted

    Returns:
        Configured SafeSlippageHandler
    """
    owned = session is None
    if session is None:
        session = httpx.AsyncClient(timeout=settings.http_timeout_seconds)

    providers = [
        DexScreenerPoolSource(
            base_url=settings.dexscreener_base,
            session=session,
            user_agent=settings.user_agent,
            timeout=settings.http_timeout_seconds,
            max_attempts=settings.http_max_attempts,
        ),
        GeckoTerminalPoolSource(
            base_url=settings.geckoterminal_base,
            session=session,
            user_agent=settings.user_agent,
            timeout=settings.http_timeout_seconds,
            max_attempts=settings.http_max_attempts,
        ),
    ]

    if payments_enabled(settings):
        logger.info(
            "Payments enabled",
            entrypoint=ENTRYPOINT_KEY,
            pay_to=settings.pay_to,
            network=settings.network,
            price=settings.default_price,
        )
    else:
        logger.warning(
            "Running in test mode, payments disabled", entrypoint=ENTRYPOINT_KEY
        )

    return SafeSlippageHandler(
        aggregator=PoolAggregator(providers),
        config=settings.estimator,
        session=session if owned else None,
    )
