"""Per-index-token maximum long/short liquidity.

Liquidity is approximated by the raw pool value: long positions are backed
by the long-token pool and short positions by the short-token pool. Reserve
factors and open interest are not taken into account.
"""

from dataclasses import dataclass

from tradebox.market.utils import get_pool_usd
from tradebox.models import Market, Token


@dataclass(frozen=True)
class MarketLiquidity:
    """Available USD liquidity of a single market."""

    market_token_address: str
    max_long_liquidity: int
    max_short_liquidity: int


@dataclass(frozen=True)
class IndexLiquidity:
    """The markets offering the most long and short liquidity for an index token."""

    index_token_address: str
    max_long_pool: MarketLiquidity
    max_short_pool: MarketLiquidity


def get_market_liquidity(market: Market, tokens: dict[str, Token]) -> MarketLiquidity:
    return MarketLiquidity(
        market_token_address=market.market_token_address,
        max_long_liquidity=get_pool_usd(market, tokens, True, "min"),
        max_short_liquidity=get_pool_usd(market, tokens, False, "min"),
    )


def get_max_long_short_liquidity_pools(
    markets: dict[str, Market],
    tokens: dict[str, Token],
) -> dict[str, IndexLiquidity]:
    """Group markets by index token and pick the max long and max short pool.

    Disabled and spot-only markets are skipped. Within a group the long and
    short winners are chosen independently; ties keep the market seen first.

    Args:
        markets: Market token address -> market record.
        tokens: Token address -> token.

    Returns:
        Index token address -> IndexLiquidity. Index tokens without any
        eligible market are absent.
    """
    result: dict[str, IndexLiquidity] = {}

    for market in markets.values():
        if market.is_disabled or market.is_spot_only:
            continue

        liquidity = get_market_liquidity(market, tokens)
        current = result.get(market.index_token_address)

        if current is None:
            result[market.index_token_address] = IndexLiquidity(
                index_token_address=market.index_token_address,
                max_long_pool=liquidity,
                max_short_pool=liquidity,
            )
            continue

        max_long_pool = current.max_long_pool
        if liquidity.max_long_liquidity > max_long_pool.max_long_liquidity:
            max_long_pool = liquidity

        max_short_pool = current.max_short_pool
        if liquidity.max_short_liquidity > max_short_pool.max_short_liquidity:
            max_short_pool = liquidity

        result[market.index_token_address] = IndexLiquidity(
            index_token_address=market.index_token_address,
            max_long_pool=max_long_pool,
            max_short_pool=max_short_pool,
        )

    return result


def get_max_long_short_liquidity_pool(
    index_token_address: str | None,
    pools: dict[str, IndexLiquidity],
) -> tuple[MarketLiquidity | None, MarketLiquidity | None]:
    """Return ``(max_long_pool, max_short_pool)`` for an index token.

    Both are None while no liquidity data exists for the token.
    """
    if index_token_address is None:
        return None, None
    entry = pools.get(index_token_address)
    if entry is None:
        return None, None
    return entry.max_long_pool, entry.max_short_pool
