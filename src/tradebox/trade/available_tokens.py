"""The universe of tokens and markets the trade box may offer.

Derived from a market snapshot on every recomputation:
- swap tokens: every collateral (long/short) token of an enabled market,
  plus the native token when a collateral is its wrapped form
- index tokens: index tokens of enabled, non-spot-only markets
- index tokens ranked by summed pool value (max price), descending
- collateral tokens ranked by summed pool value (mid price), long first
- position markets ordered by their index token's rank
"""

from dataclasses import dataclass, field

from tradebox.market.liquidity import IndexLiquidity, get_max_long_short_liquidity_pools
from tradebox.market.utils import get_pool_usd, get_pool_value_usd
from tradebox.models import Market, Token


@dataclass(frozen=True)
class AvailableTokenOptions:
    """Available tokens and markets for one snapshot.

    Token lists hold addresses. ``markets`` holds every market of the
    snapshot so pinned markets can be validated and resolved.
    """

    swap_tokens: list[str] = field(default_factory=list)
    index_tokens: list[str] = field(default_factory=list)
    sorted_index_tokens_with_pool_value: list[str] = field(default_factory=list)
    sorted_long_and_short_tokens: list[str] = field(default_factory=list)
    sorted_all_markets: list[Market] = field(default_factory=list)
    markets: dict[str, Market] = field(default_factory=dict)
    liquidity: dict[str, IndexLiquidity] = field(default_factory=dict)


def _ranked(values: dict[str, int]) -> list[str]:
    # sorted() is stable: equal values keep their encounter order.
    return sorted(values, key=lambda address: values[address], reverse=True)


def get_available_token_options(
    markets: dict[str, Market],
    tokens: dict[str, Token],
) -> AvailableTokenOptions:
    """Compute the available token universe for a snapshot.

    Markets that are disabled or reference a token missing from ``tokens``
    are ignored. Enabled markets are visited in index token symbol order so
    "first available" picks are stable across refreshes.
    """
    native_token = next((t for t in tokens.values() if t.is_native), None)

    eligible = [
        market
        for market in markets.values()
        if not market.is_disabled
        and market.index_token_address in tokens
        and market.long_token_address in tokens
        and market.short_token_address in tokens
    ]
    eligible.sort(key=lambda m: tokens[m.index_token_address].symbol)

    swap_tokens: dict[str, None] = {}
    index_tokens: dict[str, None] = {}
    index_pool_values: dict[str, int] = {}
    long_pool_values: dict[str, int] = {}
    short_pool_values: dict[str, int] = {}
    position_markets: list[Market] = []

    for market in eligible:
        long_token = tokens[market.long_token_address]
        short_token = tokens[market.short_token_address]

        if (long_token.is_wrapped or short_token.is_wrapped) and native_token is not None:
            swap_tokens[native_token.address] = None
        swap_tokens[long_token.address] = None
        swap_tokens[short_token.address] = None

        long_pool_values[long_token.address] = long_pool_values.get(
            long_token.address, 0
        ) + get_pool_usd(market, tokens, True, "mid")
        short_pool_values[short_token.address] = short_pool_values.get(
            short_token.address, 0
        ) + get_pool_usd(market, tokens, False, "mid")

        if not market.is_spot_only:
            index_tokens[market.index_token_address] = None
            position_markets.append(market)
            index_pool_values[market.index_token_address] = index_pool_values.get(
                market.index_token_address, 0
            ) + get_pool_value_usd(market, tokens, "max")

    sorted_index_tokens = _ranked(index_pool_values)
    index_rank = {address: rank for rank, address in enumerate(sorted_index_tokens)}
    sorted_all_markets = sorted(position_markets, key=lambda m: index_rank[m.index_token_address])

    long_and_short = _ranked(long_pool_values) + _ranked(short_pool_values)

    return AvailableTokenOptions(
        swap_tokens=list(swap_tokens),
        index_tokens=list(index_tokens),
        sorted_index_tokens_with_pool_value=sorted_index_tokens,
        sorted_long_and_short_tokens=list(dict.fromkeys(long_and_short)),
        sorted_all_markets=sorted_all_markets,
        markets=dict(markets),
        liquidity=get_max_long_short_liquidity_pools(
            {m.market_token_address: m for m in eligible}, tokens
        ),
    )


def get_available_markets(markets: dict[str, Market], index_token_address: str | None) -> list[Market]:
    """Enabled, non-spot-only markets trading ``index_token_address``."""
    if index_token_address is None:
        return []
    return [
        market
        for market in markets.values()
        if not market.is_disabled
        and not market.is_spot_only
        and market.index_token_address == index_token_address
    ]
