"""Market layer -- pool valuation, swap graph construction and liquidity aggregation."""

from tradebox.market.graph import MarketGraph, SwapEdge, build_market_graph
from tradebox.market.liquidity import (
    IndexLiquidity,
    MarketLiquidity,
    get_max_long_short_liquidity_pool,
    get_max_long_short_liquidity_pools,
)
from tradebox.market.utils import convert_to_token_amount, convert_to_usd, get_pool_usd

__all__ = [
    "IndexLiquidity",
    "MarketGraph",
    "MarketLiquidity",
    "SwapEdge",
    "build_market_graph",
    "convert_to_token_amount",
    "convert_to_usd",
    "get_max_long_short_liquidity_pool",
    "get_max_long_short_liquidity_pools",
    "get_pool_usd",
]
