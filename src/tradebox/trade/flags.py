"""Boolean trade flags and trade-mode availability."""

from dataclasses import dataclass

from tradebox.models import TradeMode, TradeType

AVAILABLE_TRADE_MODES: dict[TradeType, tuple[TradeMode, ...]] = {
    TradeType.LONG: (TradeMode.MARKET, TradeMode.LIMIT, TradeMode.TRIGGER),
    TradeType.SHORT: (TradeMode.MARKET, TradeMode.LIMIT, TradeMode.TRIGGER),
    TradeType.SWAP: (TradeMode.MARKET, TradeMode.LIMIT),
}


@dataclass(frozen=True)
class TradeFlags:
    is_long: bool
    is_short: bool
    is_swap: bool
    is_position: bool
    is_increase: bool
    is_market: bool
    is_limit: bool
    is_trigger: bool


def create_trade_flags(trade_type: TradeType, trade_mode: TradeMode) -> TradeFlags:
    is_position = trade_type in (TradeType.LONG, TradeType.SHORT)
    is_trigger = trade_mode == TradeMode.TRIGGER
    return TradeFlags(
        is_long=trade_type == TradeType.LONG,
        is_short=trade_type == TradeType.SHORT,
        is_swap=trade_type == TradeType.SWAP,
        is_position=is_position,
        # Trigger orders close or reduce positions.
        is_increase=is_position and not is_trigger,
        is_market=trade_mode == TradeMode.MARKET,
        is_limit=trade_mode == TradeMode.LIMIT,
        is_trigger=is_trigger,
    )


def get_available_trade_modes(trade_type: TradeType) -> tuple[TradeMode, ...]:
    return AVAILABLE_TRADE_MODES[trade_type]
