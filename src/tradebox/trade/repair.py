"""Repair pass keeping trade options consistent with the available universe.

Runs after every recomputation of the available tokens/markets and after
every user transition. Steps, in order:

  a. from token must be an available swap token, else the first one
  b. to token (index or swap destination) must be an available index
     token, else the first one, with its market chosen again
     (for swaps the destination is held to the index token set too, so a
     collateral-only token such as a stablecoin cannot be swapped into)
  c. a position trade needs a live pinned market for its index token and
     side; a missing or stale pin is re-chosen from the liquidity data
  d. collateral must be the long or short token of the pinned market,
     else the market's short token
  e. trade mode must be allowed for the trade type, else the first allowed

Each step only fires when its invariant is broken, so applying the pass to
its own output returns an equal value. Steps that depend on data not yet
loaded (empty token lists, no liquidity) are skipped rather than guessed.
"""

from tradebox.logging import get_logger
from tradebox.market.liquidity import get_max_long_short_liquidity_pool
from tradebox.models import Market, TradeOptions, TradeType
from tradebox.trade.available_tokens import AvailableTokenOptions
from tradebox.trade.flags import get_available_trade_modes
from tradebox.trade.selector import choose_market
from tradebox.trade.transitions import (
    pin_market,
    with_collateral,
    with_from_token,
    with_to_token,
    with_trade_mode,
)

logger = get_logger(__name__)


def enforce_trade_mode(options: TradeOptions) -> TradeOptions:
    """Reset the trade mode to the first one allowed for the trade type.

    Depends on the trade type alone, so it applies even before any market
    data has been loaded.
    """
    modes = get_available_trade_modes(options.trade_type)
    if options.trade_mode in modes:
        return options
    return with_trade_mode(options, modes[0])


def _is_live_market(market: Market | None, index_token_address: str) -> bool:
    return (
        market is not None
        and not market.is_disabled
        and not market.is_spot_only
        and market.index_token_address == index_token_address
    )


def _choose_and_pin(
    options: TradeOptions,
    index_token_address: str,
    universe: AvailableTokenOptions,
) -> TradeOptions:
    max_long_pool, max_short_pool = get_max_long_short_liquidity_pool(
        index_token_address, universe.liquidity
    )
    selection = choose_market(
        index_token_address,
        max_long_pool,
        max_short_pool,
        is_swap=options.trade_type == TradeType.SWAP,
        preferred_trade_type=options.trade_type,
    )
    if selection is None or selection.market_token_address is None:
        return options
    return pin_market(options, index_token_address, options.trade_type, selection.market_token_address)


def repair_trade_options(options: TradeOptions, universe: AvailableTokenOptions) -> TradeOptions:
    """Return options satisfying the universe invariants.

    Args:
        options: Current trade options.
        universe: Available tokens, markets and liquidity of the latest snapshot.

    Returns:
        Repaired options; the same instance if nothing needed repair.
    """
    repaired = options

    # a. from token
    if universe.swap_tokens and repaired.tokens.from_token_address not in universe.swap_tokens:
        repaired = with_from_token(repaired, universe.swap_tokens[0])

    # b. to token
    if universe.index_tokens and repaired.to_token_address not in universe.index_tokens:
        repaired = with_to_token(repaired, universe.index_tokens[0])
        repaired = _choose_and_pin(repaired, universe.index_tokens[0], universe)

    index_token_address = repaired.tokens.index_token_address
    is_position = repaired.trade_type != TradeType.SWAP

    # c. pinned market
    if is_position and index_token_address is not None:
        pinned = universe.markets.get(repaired.market_address or "")
        if not _is_live_market(pinned, index_token_address):
            repaired = _choose_and_pin(repaired, index_token_address, universe)

    # d. collateral
    if is_position and index_token_address is not None:
        market = universe.markets.get(repaired.market_address or "")
        if _is_live_market(market, index_token_address) and repaired.collateral_address not in (
            market.long_token_address,
            market.short_token_address,
        ):
            repaired = with_collateral(repaired, market.short_token_address)

    # e. trade mode
    repaired = enforce_trade_mode(repaired)

    if repaired != options:
        logger.debug(
            "trade_options_repaired",
            trade_type=repaired.trade_type.value,
            from_token=repaired.tokens.from_token_address,
            to_token=repaired.to_token_address,
            market=repaired.market_address,
            collateral=repaired.collateral_address,
        )
        return repaired
    return options
