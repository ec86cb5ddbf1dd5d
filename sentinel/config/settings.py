"""Application settings and configuration management."""

from pathlib import Path
from typing import Literal

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings

logger = structlog.get_logger(__name__)

DEFAULT_PAY_TO_ADDRESS = "0xb308ed39d67D0d4BAe5BC2FAEF60c66BBb6AE429"


class EstimatorConfig(BaseModel):
    """Bounds and constants of the slippage heuristic."""

    min_slippage_bps: int = Field(default=50, description="Slippage floor in bps")
    max_slippage_bps: int = Field(default=1000, description="Slippage cap in bps")
    fee_overhead_pct: float = Field(
        default=0.3, description="Fee overhead added to every estimate, in percent"
    )
    max_price_impact_pct: float = Field(
        default=5.0, description="Cap on the depth-based price impact, in percent"
    )
    max_total_slippage_pct: float = Field(
        default=10.0, description="Cap on impact + volatility + fees, in percent"
    )
    volatility_divisor: float = Field(
        default=10.0, description="Divisor applied to the absolute 24h price change"
    )
    trade_p95_factor: float = Field(
        default=0.95, description="Multiplier for the p95 trade-size proxy"
    )

    @field_validator("min_slippage_bps")
    @classmethod
    def validate_min_slippage(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"min_slippage_bps must be positive, got {v}")
        return v

    @field_validator("fee_overhead_pct", "max_price_impact_pct", "max_total_slippage_pct")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"percentages must be non-negative, got {v}")
        return v

    @field_validator("volatility_divisor")
    @classmethod
    def validate_volatility_divisor(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"volatility_divisor must be positive, got {v}")
        return v

    @model_validator(mode="after")
    def validate_bounds(self) -> "EstimatorConfig":
        if self.min_slippage_bps > self.max_slippage_bps:
            raise ValueError(
                f"min_slippage_bps ({self.min_slippage_bps}) cannot exceed "
                f"max_slippage_bps ({self.max_slippage_bps})"
            )
        return self


class AppSettings(BaseSettings):
    """Application settings with environment variable support."""

    env: Literal["dev", "prod"] = Field(
        default="dev", description="Environment: dev, prod"
    )

    # Pool data providers
    dexscreener_base: str = Field(
        default="https://api.dexscreener.com",
        description="DexScreener API base URL",
    )
    geckoterminal_base: str = Field(
        default="https://api.geckoterminal.com",
        description="GeckoTerminal API base URL",
    )
    user_agent: str = Field(
        default="slippage-sentinel/0.1 (+https://daydreams.systems)",
        description="User-Agent header sent to providers",
    )
    http_timeout_seconds: float = Field(
        default=30.0, description="Per-request HTTP timeout in seconds"
    )
    http_max_attempts: int = Field(
        default=2, description="Attempts per provider request on network errors"
    )

    # Payments (consumed by the payment gate, not by the estimator)
    facilitator_url: str = Field(
        default="https://facilitator.daydreams.systems",
        description="x402 facilitator URL",
    )
    pay_to: str = Field(
        default=DEFAULT_PAY_TO_ADDRESS, description="Payment recipient address"
    )
    network: str = Field(default="base", description="Payment network identifier")
    default_price: str = Field(default="0.02", description="Price per call in USD")

    estimator: EstimatorConfig = Field(default_factory=EstimatorConfig)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("http_max_attempts")
    @classmethod
    def validate_max_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"http_max_attempts must be at least 1, got {v}")
        return v


def payments_enabled(settings: AppSettings) -> bool:
    """Return True when a real payment recipient is configured."""
    return bool(settings.pay_to) and settings.pay_to != DEFAULT_PAY_TO_ADDRESS


def load_settings(profile: str, yaml_path: str) -> AppSettings:
    """Load settings from YAML file and environment variables.

    Args:
        profile: Configuration profile name (dev, prod)
        yaml_path: Path to YAML configuration file

    Returns:
        AppSettings instance with loaded configuration

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        ValidationError: If configuration is invalid
        ValueError: If profile is invalid or prod has no payment recipient
    """
    if profile not in ["dev", "prod"]:
        raise ValueError(f"Invalid profile: {profile}. Must be one of: dev, prod")

    yaml_file = Path(yaml_path)
    if not yaml_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

    try:
        with open(yaml_file, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        yaml_config["env"] = profile

        logger.info("Loading configuration", profile=profile, yaml_path=yaml_path)

        settings = AppSettings(**yaml_config)

        if profile == "prod" and not payments_enabled(settings):
            raise ValueError(
                "prod profile requires pay_to to be set to a real payment recipient"
            )

        logger.info(
            "Configuration loaded successfully",
            profile=profile,
            dexscreener_base=settings.dexscreener_base,
            geckoterminal_base=settings.geckoterminal_base,
            network=settings.network,
        )

        return settings

    except yaml.YAMLError as e:
        logger.error("Failed to parse YAML configuration", error=str(e))
        raise ValueError(f"Invalid YAML configuration: {e}") from e
    except ValidationError as e:
        logger.error("Configuration validation failed", error=str(e))
        raise
    except Exception as e:
        logger.error("Unexpected error loading configuration", error=str(e))
        raise
