"""Shared data models for the trade routing engine.

CRITICAL: All monetary values are fixed-point ``int``. Never use float for
prices, pool amounts or USD values. Token prices are USD per one whole token
expressed with USD_DECIMALS decimals; token amounts carry the token's own
decimals.
"""

from dataclasses import dataclass, field
from enum import Enum

USD_DECIMALS = 20
ONE_USD = 10**USD_DECIMALS

# Preference accepted by choose_market in addition to LONG / SHORT.
LARGEST_POSITION = "largestPosition"


class TradeType(str, Enum):
    """High-level trading intent."""

    LONG = "Long"
    SHORT = "Short"
    SWAP = "Swap"


class TradeMode(str, Enum):
    """Execution timing intent."""

    MARKET = "Market"
    LIMIT = "Limit"
    TRIGGER = "Trigger"


@dataclass(frozen=True)
class Token:
    """A token with its resolved price range.

    ``wrapped_address`` cross-references the wrapped counterpart of a native
    token (or vice versa).
    """

    address: str
    symbol: str
    decimals: int
    min_price: int
    max_price: int
    is_native: bool = False
    is_wrapped: bool = False
    wrapped_address: str | None = None

    @property
    def mid_price(self) -> int:
        return (self.min_price + self.max_price) // 2


@dataclass(frozen=True)
class Market:
    """A liquidity pool pairing a long-side and a short-side token.

    Pool amounts are raw token amounts of the long/short token.
    """

    market_token_address: str
    index_token_address: str
    long_token_address: str
    short_token_address: str
    long_pool_amount: int = 0
    short_pool_amount: int = 0
    is_spot_only: bool = False
    is_disabled: bool = False

    @property
    def is_single(self) -> bool:
        """Single-collateral market: the long and short token are the same."""
        return self.long_token_address == self.short_token_address


@dataclass
class MarketSnapshot:
    """Market/token/price snapshot delivered by the data collaborator.

    Compared by value: two snapshots with equal tokens and markets are the
    same input for recomputation purposes.
    """

    tokens: dict[str, Token] = field(default_factory=dict)
    markets: dict[str, Market] = field(default_factory=dict)


@dataclass(frozen=True)
class SelectedTokens:
    """Token addresses chosen in the trade box."""

    from_token_address: str | None = None
    index_token_address: str | None = None
    swap_to_token_address: str | None = None


@dataclass(frozen=True)
class PinnedMarkets:
    """Market pinned for each side of an index token."""

    long_market_address: str | None = None
    short_market_address: str | None = None


@dataclass(frozen=True)
class TradeOptions:
    """The user's current trade selection.

    Immutable: transitions build a new value with ``dataclasses.replace``.
    ``markets`` maps index token address to the markets pinned for it and
    must never be mutated in place.
    """

    trade_type: TradeType = TradeType.LONG
    trade_mode: TradeMode = TradeMode.MARKET
    tokens: SelectedTokens = field(default_factory=SelectedTokens)
    markets: dict[str, PinnedMarkets] = field(default_factory=dict)
    collateral_address: str | None = None

    @property
    def to_token_address(self) -> str | None:
        """Swap destination for swaps, index token for positions."""
        if self.trade_type == TradeType.SWAP:
            return self.tokens.swap_to_token_address
        return self.tokens.index_token_address

    @property
    def market_address(self) -> str | None:
        """Market pinned for the current index token and side, if any.

        Swaps route through their own path and never pin a market.
        """
        if self.trade_type == TradeType.SWAP:
            return None
        to_token = self.tokens.index_token_address
        if to_token is None:
            return None
        pinned = self.markets.get(to_token)
        if pinned is None:
            return None
        if self.trade_type == TradeType.LONG:
            return pinned.long_market_address
        return pinned.short_market_address


DEFAULT_TRADE_OPTIONS = TradeOptions()
