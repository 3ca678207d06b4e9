"""Derived amounts: user input parsing, USD values and token price ratios.

CRITICAL: Everything here is fixed-point integer arithmetic. Decimal is
only used to read user text; its digits are converted to an int exactly,
never through float and never through a precision-limited context.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from tradebox.market.utils import convert_to_token_amount, convert_to_usd
from tradebox.models import ONE_USD, USD_DECIMALS, Token
from tradebox.trade.flags import TradeFlags

# Inputs with more integer digits than this are rejected as invalid.
MAX_INPUT_DIGITS = 78


@dataclass(frozen=True)
class TokensRatio:
    """Price ratio of two tokens, oriented larger-price over smaller-price.

    ``ratio`` carries USD_DECIMALS decimals: a ratio of 100 is
    ``100 * ONE_USD``.
    """

    ratio: int
    largest_token: Token
    smallest_token: Token


@dataclass(frozen=True)
class TradeRatios:
    mark_ratio: TokensRatio | None = None
    trigger_ratio: TokensRatio | None = None


def parse_value(text: str | None, decimals: int) -> int | None:
    """Parse decimal text into a fixed-point int with ``decimals`` decimals.

    Extra fractional digits are truncated. Returns None for empty, invalid,
    non-finite, negative or absurdly large input.
    """
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None

    try:
        value = Decimal(text)
    except InvalidOperation:
        return None

    if not value.is_finite() or value.is_signed():
        return None
    if value.is_zero():
        return 0
    if value.adjusted() > MAX_INPUT_DIGITS:
        return None

    _, digits, exponent = value.as_tuple()
    coefficient = int("".join(str(d) for d in digits))
    shift = exponent + decimals
    if shift >= 0:
        return coefficient * 10**shift
    if -shift > len(digits):
        return 0
    return coefficient // 10**-shift


def parse_amount(text: str | None, token: Token | None) -> int:
    """Parse a user-entered token amount; anything unparseable is zero."""
    if token is None:
        return 0
    return parse_value(text or "0", token.decimals) or 0


def parse_ratio(text: str | None) -> int | None:
    """Parse a user-entered trigger ratio with USD_DECIMALS decimals."""
    return parse_value(text, USD_DECIMALS)


def to_usd(amount: int, token: Token | None, price: int | None) -> int | None:
    """USD value of a raw token amount.

    Returns None (unknown) when the token or price is unavailable, which is
    distinct from a zero value.
    """
    if token is None or price is None:
        return None
    return convert_to_usd(amount, token.decimals, price)


def to_token_amount(usd: int | None, token: Token | None, price: int | None) -> int | None:
    """Raw amount of ``token`` worth ``usd`` at ``price``, rounded down.

    Returns None when any input is unknown or the price is not positive.
    """
    if token is None:
        return None
    return convert_to_token_amount(usd, token.decimals, price)


def tokens_ratio(token_a: Token, price_a: int, token_b: Token, price_b: int) -> TokensRatio | None:
    """Ratio of the larger token price to the smaller one.

    The token identities are kept so the ratio can be displayed the right
    way round whatever order the arguments came in. Returns None if either
    price is not positive.
    """
    if price_a <= 0 or price_b <= 0:
        return None

    if price_a > price_b:
        largest, smallest, largest_price, smallest_price = token_a, token_b, price_a, price_b
    else:
        largest, smallest, largest_price, smallest_price = token_b, token_a, price_b, price_a

    return TokensRatio(
        ratio=largest_price * ONE_USD // smallest_price,
        largest_token=largest,
        smallest_token=smallest,
    )


def get_mark_price(token: Token, is_increase: bool, is_long: bool) -> int:
    """Execution-side price: the worse end of the range for the trader."""
    use_max_price = is_long if is_increase else not is_long
    return token.max_price if use_max_price else token.min_price


def get_trade_ratios(
    flags: TradeFlags,
    from_token: Token | None,
    to_token: Token | None,
    mark_price: int | None,
    trigger_ratio_value: int | None,
) -> TradeRatios:
    """Mark and trigger ratios for a swap.

    Non-swap trades, or swaps with unresolved tokens or prices, have no
    ratios. A missing or non-positive trigger ratio input falls back to the
    mark ratio value.
    """
    if not flags.is_swap or from_token is None or to_token is None or not mark_price:
        return TradeRatios()

    mark_ratio = tokens_ratio(from_token, from_token.min_price, to_token, mark_price)
    if mark_ratio is None or trigger_ratio_value is None:
        return TradeRatios(mark_ratio=mark_ratio)

    trigger_ratio = TokensRatio(
        ratio=trigger_ratio_value if trigger_ratio_value > 0 else mark_ratio.ratio,
        largest_token=mark_ratio.largest_token,
        smallest_token=mark_ratio.smallest_token,
    )
    return TradeRatios(mark_ratio=mark_ratio, trigger_ratio=trigger_ratio)
