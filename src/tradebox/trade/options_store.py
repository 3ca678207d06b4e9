"""Persisted, self-repairing trade options state.

TradeOptionsStore owns the single TradeOptions value of one network. All
changes flow through its named transitions; each builds a new immutable
value, runs the repair pass against the last synced universe (only the
trade-mode rule before the first sync), and is only
accepted (persisted and announced to subscribers) if the result differs
from the current value. Re-syncing an unchanged universe therefore causes
no writes and no notifications.
"""

from collections.abc import Callable

from pydantic import ValidationError

from tradebox.exceptions import StorageError
from tradebox.logging import get_logger
from tradebox.market.liquidity import get_max_long_short_liquidity_pool
from tradebox.models import DEFAULT_TRADE_OPTIONS, LARGEST_POSITION, TradeMode, TradeOptions, TradeType
from tradebox.trade.available_tokens import AvailableTokenOptions
from tradebox.trade.repair import enforce_trade_mode, repair_trade_options
from tradebox.trade.selector import choose_market
from tradebox.trade.storage import TradeOptionsKey, TradeOptionsRecord, TradeOptionsStorage
from tradebox.trade.transitions import (
    TradeParams,
    with_collateral,
    with_from_token,
    with_switched_tokens,
    with_to_token,
    with_trade_mode,
    with_trade_params,
    with_trade_type,
)

logger = get_logger(__name__)

Listener = Callable[[TradeOptions], None]


class TradeOptionsStore:
    """Single-writer store for the trade options of one network.

    Args:
        key: Typed persistence key for this network.
        storage: Backend used to load the initial value and save changes.
    """

    def __init__(self, key: TradeOptionsKey, storage: TradeOptionsStorage) -> None:
        self._key = key
        self._storage = storage
        self._listeners: list[Listener] = []
        self._universe: AvailableTokenOptions | None = None
        self._options = self._load()

    @property
    def key(self) -> TradeOptionsKey:
        return self._key

    @property
    def options(self) -> TradeOptions:
        return self._options

    @property
    def universe(self) -> AvailableTokenOptions | None:
        return self._universe

    def _load(self) -> TradeOptions:
        """Load stored options, falling back to the defaults on any failure."""
        try:
            blob = self._storage.load(self._key)
        except StorageError as e:
            logger.warning("trade_options_load_failed", key=self._key.storage_key, error=str(e))
            return DEFAULT_TRADE_OPTIONS

        if blob is None:
            return DEFAULT_TRADE_OPTIONS

        try:
            return enforce_trade_mode(TradeOptionsRecord.model_validate(blob).to_options())
        except ValidationError as e:
            logger.warning(
                "trade_options_invalid",
                key=self._key.storage_key,
                errors=e.error_count(),
            )
            return DEFAULT_TRADE_OPTIONS

    def _save(self, options: TradeOptions) -> None:
        record = TradeOptionsRecord.from_options(options)
        try:
            self._storage.save(self._key, record.model_dump(mode="json"))
        except StorageError as e:
            # The in-memory value stays authoritative; the next accepted
            # transition retries the write.
            logger.error("trade_options_save_failed", key=self._key.storage_key, error=str(e))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with the new options after each change.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, candidate: TradeOptions) -> bool:
        if self._universe is not None:
            candidate = repair_trade_options(candidate, self._universe)
        else:
            candidate = enforce_trade_mode(candidate)

        if candidate == self._options:
            return False

        self._options = candidate
        self._save(candidate)
        for listener in list(self._listeners):
            listener(candidate)
        return True

    # ──────────────────────────────────────────────
    # Recomputation entry point
    # ──────────────────────────────────────────────

    def sync(self, universe: AvailableTokenOptions) -> bool:
        """Adopt a new available universe and run the repair pass.

        Returns:
            True if the options changed (and were persisted).
        """
        self._universe = universe
        return self._commit(self._options)

    # ──────────────────────────────────────────────
    # Transitions
    # ──────────────────────────────────────────────

    def set_trade_type(self, trade_type: TradeType) -> bool:
        return self._commit(with_trade_type(self._options, trade_type))

    def set_trade_mode(self, trade_mode: TradeMode) -> bool:
        return self._commit(with_trade_mode(self._options, trade_mode))

    def set_from_token(self, address: str | None) -> bool:
        return self._commit(with_from_token(self._options, address))

    def set_to_token(
        self,
        address: str,
        market_address: str | None = None,
        trade_type: TradeType | None = None,
    ) -> bool:
        return self._commit(with_to_token(self._options, address, market_address, trade_type))

    def set_trade_params(self, params: TradeParams) -> bool:
        return self._commit(with_trade_params(self._options, params))

    def set_collateral(self, address: str | None) -> bool:
        return self._commit(with_collateral(self._options, address))

    def switch_token_addresses(self) -> bool:
        return self._commit(with_switched_tokens(self._options))

    def select_market(
        self,
        index_token_address: str,
        preferred_trade_type: TradeType | str = LARGEST_POSITION,
    ) -> bool:
        """Select an index token and pin its most liquid market in one step.

        Used when a token is picked from search results. Nothing changes
        while no liquidity data is available for the token.
        """
        liquidity = self._universe.liquidity if self._universe is not None else {}
        max_long_pool, max_short_pool = get_max_long_short_liquidity_pool(
            index_token_address, liquidity
        )
        selection = choose_market(
            index_token_address,
            max_long_pool,
            max_short_pool,
            is_swap=self._options.trade_type == TradeType.SWAP,
            preferred_trade_type=preferred_trade_type,
        )
        if selection is None:
            return False

        return self.set_trade_params(
            TradeParams(
                trade_type=selection.trade_type,
                to_token_address=selection.index_token_address,
                market_address=selection.market_token_address,
            )
        )
