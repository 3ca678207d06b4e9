"""Trade layer -- market selection, trade options state, repair and derived amounts."""

from tradebox.trade.amounts import (
    TokensRatio,
    TradeRatios,
    get_mark_price,
    get_trade_ratios,
    parse_amount,
    parse_ratio,
    parse_value,
    to_token_amount,
    to_usd,
    tokens_ratio,
)
from tradebox.trade.available_tokens import (
    AvailableTokenOptions,
    get_available_markets,
    get_available_token_options,
)
from tradebox.trade.flags import TradeFlags, create_trade_flags, get_available_trade_modes
from tradebox.trade.options_store import TradeOptionsStore
from tradebox.trade.repair import enforce_trade_mode, repair_trade_options
from tradebox.trade.selector import MarketSelection, choose_market
from tradebox.trade.storage import (
    InMemoryStorage,
    JsonFileStorage,
    TradeOptionsKey,
    TradeOptionsRecord,
    TradeOptionsStorage,
    create_storage,
)
from tradebox.trade.transitions import TradeParams

__all__ = [
    "AvailableTokenOptions",
    "InMemoryStorage",
    "JsonFileStorage",
    "MarketSelection",
    "TokensRatio",
    "TradeFlags",
    "TradeOptionsKey",
    "TradeOptionsRecord",
    "TradeOptionsStorage",
    "TradeOptionsStore",
    "TradeParams",
    "TradeRatios",
    "choose_market",
    "create_storage",
    "create_trade_flags",
    "enforce_trade_mode",
    "get_available_markets",
    "get_available_token_options",
    "get_available_trade_modes",
    "get_mark_price",
    "get_trade_ratios",
    "parse_amount",
    "parse_ratio",
    "parse_value",
    "repair_trade_options",
    "to_token_amount",
    "to_usd",
    "tokens_ratio",
]
