"""Trade box facade: the read-only query surface plus the mutation entry points.

Wires the memoized market state engine to the trade options store and
derives everything the UI reads (flags, resolved tokens, amounts, USD
values, candidate markets, swap route, ratios). Every query is a pure
function of the current snapshot, the current options and the raw input
strings; every state change goes through the store's transitions.
"""

from tradebox.config import AppSettings, RoutingSettings
from tradebox.engine import MarketState, MarketStateEngine
from tradebox.logging import bind_chain, get_logger
from tradebox.models import LARGEST_POSITION, Market, MarketSnapshot, Token, TradeMode, TradeOptions, TradeType
from tradebox.routing.pathfinder import SwapPath, find_path
from tradebox.trade.amounts import (
    TradeRatios,
    get_mark_price,
    get_trade_ratios,
    parse_amount,
    parse_ratio,
    to_token_amount,
    to_usd,
)
from tradebox.trade.available_tokens import get_available_markets
from tradebox.trade.flags import TradeFlags, create_trade_flags, get_available_trade_modes
from tradebox.trade.options_store import TradeOptionsStore
from tradebox.trade.storage import TradeOptionsKey, create_storage
from tradebox.trade.transitions import TradeParams

logger = get_logger(__name__)


class TradeBox:
    """Trade selection state and derived values for one network.

    Args:
        store: Trade options store of the network.
        engine: Market state engine; a fresh one is created if omitted.
        routing_settings: Swap route search parameters.
    """

    def __init__(
        self,
        store: TradeOptionsStore,
        engine: MarketStateEngine | None = None,
        routing_settings: RoutingSettings | None = None,
    ) -> None:
        self._store = store
        self._engine = engine or MarketStateEngine()
        self._routing = routing_settings or RoutingSettings()
        self._route_cache: tuple[object, str | None, str | None, SwapPath] | None = None

        self.from_input = ""
        self.to_input = ""
        self.trigger_ratio_input = ""
        self.focused_input: str | None = None

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "TradeBox":
        bind_chain(settings.chain_id)
        store = TradeOptionsStore(
            TradeOptionsKey(chain_id=settings.chain_id),
            create_storage(settings.storage),
        )
        return cls(store, routing_settings=settings.routing)

    @property
    def store(self) -> TradeOptionsStore:
        return self._store

    @property
    def state(self) -> MarketState | None:
        return self._engine.state

    def refresh(self, snapshot: MarketSnapshot) -> MarketState:
        """Recompute derived market state and repair the trade options against it."""
        state = self._engine.refresh(snapshot)
        if self._store.sync(state.options):
            logger.debug(
                "trade_options_synced",
                trade_type=self.options.trade_type.value,
                from_token=self.options.tokens.from_token_address,
                to_token=self.options.to_token_address,
            )
        return state

    # ──────────────────────────────────────────────
    # Transitions
    # ──────────────────────────────────────────────

    def set_trade_type(self, trade_type: TradeType) -> bool:
        return self._store.set_trade_type(trade_type)

    def set_trade_mode(self, trade_mode: TradeMode) -> bool:
        return self._store.set_trade_mode(trade_mode)

    def set_from_token(self, address: str | None) -> bool:
        return self._store.set_from_token(address)

    def set_to_token(
        self,
        address: str,
        market_address: str | None = None,
        trade_type: TradeType | None = None,
    ) -> bool:
        return self._store.set_to_token(address, market_address, trade_type)

    def set_trade_params(self, params: TradeParams) -> bool:
        return self._store.set_trade_params(params)

    def set_collateral(self, address: str | None) -> bool:
        return self._store.set_collateral(address)

    def switch_token_addresses(self) -> bool:
        return self._store.switch_token_addresses()

    def select_market(self, index_token_address: str, preferred_trade_type: TradeType | str = LARGEST_POSITION) -> bool:
        return self._store.select_market(index_token_address, preferred_trade_type)

    # ──────────────────────────────────────────────
    # Queries
    # ──────────────────────────────────────────────

    @property
    def options(self) -> TradeOptions:
        return self._store.options

    @property
    def trade_flags(self) -> TradeFlags:
        return create_trade_flags(self.options.trade_type, self.options.trade_mode)

    @property
    def available_trade_modes(self) -> tuple[TradeMode, ...]:
        return get_available_trade_modes(self.options.trade_type)

    def _token(self, address: str | None) -> Token | None:
        state = self._engine.state
        if state is None or address is None:
            return None
        return state.snapshot.tokens.get(address)

    @property
    def from_token(self) -> Token | None:
        return self._token(self.options.tokens.from_token_address)

    @property
    def to_token(self) -> Token | None:
        return self._token(self.options.to_token_address)

    @property
    def collateral_token(self) -> Token | None:
        return self._token(self.options.collateral_address)

    @property
    def market(self) -> Market | None:
        """The pinned market of the current position trade, if known."""
        state = self._engine.state
        address = self.options.market_address
        if state is None or address is None:
            return None
        return state.snapshot.markets.get(address)

    @property
    def available_markets(self) -> list[Market]:
        """Candidate markets for the current index token (position trades only)."""
        state = self._engine.state
        if state is None or not self.trade_flags.is_position:
            return []
        return get_available_markets(state.snapshot.markets, self.options.tokens.index_token_address)

    # The focused input is typed by the user; the other side follows it
    # through its USD value.

    @property
    def from_amount(self) -> int:
        token = self.from_token
        if self.focused_input == "to" and token is not None:
            return to_token_amount(self._input_usd("to"), token, token.min_price) or 0
        return parse_amount(self.from_input, token)

    @property
    def to_amount(self) -> int:
        token = self.to_token
        if self.focused_input == "from" and token is not None:
            return to_token_amount(self._input_usd("from"), token, self.mark_price) or 0
        return parse_amount(self.to_input, token)

    def _input_usd(self, side: str) -> int | None:
        if side == "from":
            token, text = self.from_token, self.from_input
        else:
            token, text = self.to_token, self.to_input
        price = token.min_price if token else None
        return to_usd(parse_amount(text, token), token, price)

    @property
    def from_usd(self) -> int | None:
        token = self.from_token
        return to_usd(self.from_amount, token, token.min_price if token else None)

    @property
    def to_usd(self) -> int | None:
        token = self.to_token
        return to_usd(self.to_amount, token, token.min_price if token else None)

    @property
    def trigger_ratio_value(self) -> int | None:
        return parse_ratio(self.trigger_ratio_input)

    @property
    def mark_price(self) -> int | None:
        token = self.to_token
        if token is None:
            return None
        flags = self.trade_flags
        if flags.is_swap:
            return token.min_price
        return get_mark_price(token, flags.is_increase, flags.is_long)

    @property
    def trade_ratios(self) -> TradeRatios:
        return get_trade_ratios(
            self.trade_flags,
            self.from_token,
            self.to_token,
            self.mark_price,
            self.trigger_ratio_value,
        )

    @property
    def swap_route(self) -> SwapPath:
        """Route from the from token to the swap destination.

        Empty for position trades, before the first snapshot, or when no
        route exists within the hop bound (insufficient liquidity).
        """
        state = self._engine.state
        if state is None or not self.trade_flags.is_swap:
            return SwapPath.empty()

        source = self.options.tokens.from_token_address
        dest = self.options.tokens.swap_to_token_address
        cached = self._route_cache
        if cached is not None and cached[0] is state.graph and cached[1] == source and cached[2] == dest:
            return cached[3]

        if source is None or dest is None:
            route = SwapPath.empty()
        else:
            route = find_path(state.graph, source, dest, max_hops=self._routing.max_swap_hops)

        self._route_cache = (state.graph, source, dest, route)
        return route

    @property
    def has_swap_liquidity(self) -> bool:
        return self.swap_route.found
