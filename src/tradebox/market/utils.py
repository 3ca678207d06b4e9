"""Pool valuation helpers shared by the graph builder and liquidity aggregator.

All values are fixed-point ints. USD values carry USD_DECIMALS decimals.
"""

from typing import Literal

from tradebox.models import Market, Token

PriceType = Literal["min", "max", "mid"]


def expand_decimals(value: int, decimals: int) -> int:
    """Return ``value * 10**decimals``."""
    return value * 10**decimals


def convert_to_usd(amount: int | None, decimals: int | None, price: int | None) -> int | None:
    """Convert a raw token amount to USD.

    Returns None when any input is unknown so callers can tell "unknown"
    apart from a genuine zero.
    """
    if amount is None or decimals is None or price is None:
        return None
    return amount * price // expand_decimals(1, decimals)


def convert_to_token_amount(usd: int | None, decimals: int | None, price: int | None) -> int | None:
    """Convert a USD value to a raw token amount at ``price``.

    Returns None for unknown inputs or a non-positive price.
    """
    if usd is None or decimals is None or price is None or price <= 0:
        return None
    return usd * expand_decimals(1, decimals) // price


def get_token_price(token: Token, price_type: PriceType) -> int:
    if price_type == "min":
        return token.min_price
    if price_type == "max":
        return token.max_price
    return token.mid_price


def get_pool_usd(
    market: Market,
    tokens: dict[str, Token],
    is_long: bool,
    price_type: PriceType = "min",
) -> int:
    """USD value of one side of a market's pool, without PnL.

    A side whose token is missing from ``tokens`` is valued at zero.

    Args:
        market: The market whose pool is valued.
        tokens: Token map used to resolve decimals and prices.
        is_long: Value the long-token pool if True, else the short-token pool.
        price_type: Which price of the token range to use.

    Returns:
        Pool value in USD with USD_DECIMALS decimals.
    """
    if is_long:
        address, amount = market.long_token_address, market.long_pool_amount
    else:
        address, amount = market.short_token_address, market.short_pool_amount

    token = tokens.get(address)
    if token is None:
        return 0

    return convert_to_usd(amount, token.decimals, get_token_price(token, price_type)) or 0


def get_pool_value_usd(market: Market, tokens: dict[str, Token], price_type: PriceType = "max") -> int:
    """Total USD value of both sides of a market's pool.

    Single-collateral markets track the long and short pool amounts
    separately even though they hold the same token, so both are summed.
    """
    return get_pool_usd(market, tokens, True, price_type) + get_pool_usd(
        market, tokens, False, price_type
    )
