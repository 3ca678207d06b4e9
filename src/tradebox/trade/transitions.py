"""Pure TradeOptions transitions.

Each function returns a new TradeOptions and leaves its input untouched.
When nothing changes the input instance itself is returned, so callers can
detect no-op transitions with an identity or equality check.
"""

from dataclasses import dataclass, replace

from tradebox.models import PinnedMarkets, TradeMode, TradeOptions, TradeType


@dataclass(frozen=True)
class TradeParams:
    """Subset of trade options to change atomically. None means "keep".

    ``market_address`` is pinned for ``to_token_address`` when given, else
    for the current index token. Swaps ignore it.
    """

    trade_type: TradeType | None = None
    trade_mode: TradeMode | None = None
    from_token_address: str | None = None
    to_token_address: str | None = None
    market_address: str | None = None
    collateral_address: str | None = None


def _changed(old: TradeOptions, new: TradeOptions) -> TradeOptions:
    return old if new == old else new


def with_trade_type(options: TradeOptions, trade_type: TradeType) -> TradeOptions:
    return _changed(options, replace(options, trade_type=trade_type))


def with_trade_mode(options: TradeOptions, trade_mode: TradeMode) -> TradeOptions:
    return _changed(options, replace(options, trade_mode=trade_mode))


def with_from_token(options: TradeOptions, address: str | None) -> TradeOptions:
    tokens = replace(options.tokens, from_token_address=address)
    return _changed(options, replace(options, tokens=tokens))


def with_collateral(options: TradeOptions, address: str | None) -> TradeOptions:
    return _changed(options, replace(options, collateral_address=address))


def pin_market(
    options: TradeOptions,
    index_token_address: str,
    trade_type: TradeType,
    market_address: str,
) -> TradeOptions:
    """Record the market used for one side of an index token.

    Swaps do not pin markets; a SWAP trade type leaves options unchanged.
    """
    if trade_type == TradeType.SWAP:
        return options

    pinned = options.markets.get(index_token_address, PinnedMarkets())
    if trade_type == TradeType.LONG:
        pinned = replace(pinned, long_market_address=market_address)
    else:
        pinned = replace(pinned, short_market_address=market_address)

    markets = {**options.markets, index_token_address: pinned}
    return _changed(options, replace(options, markets=markets))


def with_to_token(
    options: TradeOptions,
    address: str,
    market_address: str | None = None,
    trade_type: TradeType | None = None,
) -> TradeOptions:
    """Set the destination token, optionally switching trade type and pinning a market.

    The trade type in effect after the optional switch decides whether the
    address is a swap destination or an index token.
    """
    new = replace(options, trade_type=trade_type) if trade_type is not None else options

    if new.trade_type == TradeType.SWAP:
        new = replace(new, tokens=replace(new.tokens, swap_to_token_address=address))
    else:
        new = replace(new, tokens=replace(new.tokens, index_token_address=address))
        if market_address:
            new = pin_market(new, address, new.trade_type, market_address)

    return _changed(options, new)


def with_trade_params(options: TradeOptions, params: TradeParams) -> TradeOptions:
    """Apply several fields at once, as a single transition."""
    new = options

    if params.trade_type is not None:
        new = replace(new, trade_type=params.trade_type)
    if params.trade_mode is not None:
        new = replace(new, trade_mode=params.trade_mode)
    if params.from_token_address:
        new = with_from_token(new, params.from_token_address)
    if params.to_token_address:
        new = with_to_token(new, params.to_token_address, params.market_address)
    elif params.market_address and new.tokens.index_token_address:
        new = pin_market(new, new.tokens.index_token_address, new.trade_type, params.market_address)
    if params.collateral_address:
        new = replace(new, collateral_address=params.collateral_address)

    return _changed(options, new)


def with_switched_tokens(options: TradeOptions) -> TradeOptions:
    """Swap the from token with the swap destination or index token."""
    tokens = options.tokens
    if options.trade_type == TradeType.SWAP:
        tokens = replace(
            tokens,
            from_token_address=tokens.swap_to_token_address,
            swap_to_token_address=tokens.from_token_address,
        )
    else:
        tokens = replace(
            tokens,
            from_token_address=tokens.index_token_address,
            index_token_address=tokens.from_token_address,
        )
    return _changed(options, replace(options, tokens=tokens))
