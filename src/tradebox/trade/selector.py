"""Suitable market selection for a trade intent.

Given the max-liquidity pools of an index token, decides which concrete
market (and therefore which collateral pair) a Long or Short trade should
use. Swaps never pick a market here: their route is resolved separately by
the path finder.
"""

from dataclasses import dataclass

from tradebox.logging import get_logger
from tradebox.market.liquidity import MarketLiquidity
from tradebox.models import LARGEST_POSITION, TradeType

logger = get_logger(__name__)


@dataclass(frozen=True)
class MarketSelection:
    """Outcome of choose_market.

    ``market_token_address`` is None for swaps. The collateral token is
    left to the trade options repair pass.
    """

    index_token_address: str
    trade_type: TradeType
    market_token_address: str | None = None


def choose_market(
    index_token_address: str,
    max_long_liquidity_pool: MarketLiquidity | None,
    max_short_liquidity_pool: MarketLiquidity | None,
    is_swap: bool,
    preferred_trade_type: TradeType | str,
) -> MarketSelection | None:
    """Pick the market to trade an index token on.

    Rules, in order:
    1. Swaps return a Swap selection without a market.
    2. ``largestPosition`` falls back to the max long liquidity market
       (position-size comparison is not implemented).
    3. Long uses the max long liquidity market.
    4. Short uses the max short liquidity market.

    Args:
        index_token_address: Index token being traded.
        max_long_liquidity_pool: Market with the most long liquidity, if known.
        max_short_liquidity_pool: Market with the most short liquidity, if known.
        is_swap: Whether the trade is a swap.
        preferred_trade_type: LONG, SHORT or ``largestPosition``.

    Returns:
        The selection, or None when no liquidity data exists yet for the
        requested side. None is transient: retry on the next recomputation.
    """
    if is_swap:
        return MarketSelection(index_token_address=index_token_address, trade_type=TradeType.SWAP)

    if preferred_trade_type in (LARGEST_POSITION, TradeType.LONG):
        pool, trade_type = max_long_liquidity_pool, TradeType.LONG
    elif preferred_trade_type == TradeType.SHORT:
        pool, trade_type = max_short_liquidity_pool, TradeType.SHORT
    else:
        logger.debug(
            "market_selection_unsupported_preference",
            index_token=index_token_address,
            preferred=str(preferred_trade_type),
        )
        return None

    if pool is None:
        logger.debug(
            "market_selection_no_liquidity",
            index_token=index_token_address,
            trade_type=trade_type.value,
        )
        return None

    return MarketSelection(
        index_token_address=index_token_address,
        trade_type=trade_type,
        market_token_address=pool.market_token_address,
    )
