"""Shared coercion helpers for provider payloads."""

import math
import re
from collections.abc import Mapping
from typing import Any, NamedTuple

from ..config.chains import ROUTE_HINT_SEPARATOR
from ..core.types import TokenRef

_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


class RouteHint(NamedTuple):
    """Parsed route hint: either a chain or a direct pair locator."""

    chain: str | None
    pair_path: str | None


def parse_or_zero(value: Any) -> float:
    """Coerce a loosely typed number to a finite float, 0.0 when unusable."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def normalize_hex(value: Any) -> str:
    """Lowercase and strip an address, empty string for non-strings."""
    return value.strip().lower() if isinstance(value, str) else ""


def is_valid_address(address: Any) -> bool:
    """Check for ``0x`` followed by 40 hex digits, case-insensitive."""
    return isinstance(address, str) and _ADDRESS_RE.fullmatch(address) is not None


def parse_route_hint(
    route_hint: str | None, aliases: Mapping[str, str] | None = None
) -> RouteHint:
    """Split a route hint into a resolved chain or a pair path.

    Args:
        route_hint: Caller-supplied hint, e.g. ``"base"`` or ``"base/0xpair"``
        aliases: Chain alias table of the provider

    Returns:
        RouteHint with at most one of ``chain`` and ``pair_path`` set
    """
    if not route_hint or not route_hint.strip():
        return RouteHint(chain=None, pair_path=None)

    hint = route_hint.strip()
    if ROUTE_HINT_SEPARATOR in hint:
        return RouteHint(chain=None, pair_path=hint)

    return RouteHint(chain=resolve_chain(hint, aliases), pair_path=None)


def resolve_chain(chain: str, aliases: Mapping[str, str] | None = None) -> str:
    """Resolve a chain name through an alias table; unknown names pass through."""
    key = chain.strip().lower()
    if aliases is None:
        return key
    return aliases.get(key, key)


def parse_token(data: Any) -> TokenRef | None:
    """Map a provider token object to a TokenRef."""
    if not isinstance(data, Mapping):
        return None
    symbol = data.get("symbol")
    return TokenRef(
        address=str(data.get("address") or ""),
        symbol=str(symbol) if symbol is not None else None,
    )


def matches_pair(
    base: TokenRef | None, quote: TokenRef | None, token_in: str, token_out: str
) -> bool:
    """Return True if base/quote are the requested tokens in either order."""
    base_addr = normalize_hex(base.address if base else None)
    quote_addr = normalize_hex(quote.address if quote else None)
    token_in_lower = normalize_hex(token_in)
    token_out_lower = normalize_hex(token_out)

    return (base_addr == token_in_lower and quote_addr == token_out_lower) or (
        base_addr == token_out_lower and quote_addr == token_in_lower
    )
