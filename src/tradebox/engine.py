"""Memoized recomputation of everything derived from a market snapshot.

Each snapshot arrival recomputes the market graph, the liquidity
aggregation and the available token universe from scratch; nothing is
updated incrementally. A snapshot equal to the previous one returns the
previous MarketState instance, so downstream consumers (and the trade
options store) see no new objects and do no redundant work.
"""

from dataclasses import dataclass

from tradebox.logging import get_logger
from tradebox.market.graph import MarketGraph, build_market_graph
from tradebox.models import MarketSnapshot
from tradebox.trade.available_tokens import AvailableTokenOptions, get_available_token_options

logger = get_logger(__name__)


@dataclass(frozen=True)
class MarketState:
    """All values derived from one snapshot."""

    snapshot: MarketSnapshot
    graph: MarketGraph
    options: AvailableTokenOptions


class MarketStateEngine:
    """Pull-based memoization layer over the snapshot-derived values."""

    def __init__(self) -> None:
        self._state: MarketState | None = None
        self._recomputations = 0

    @property
    def state(self) -> MarketState | None:
        return self._state

    @property
    def recomputations(self) -> int:
        """Number of full recomputations performed so far."""
        return self._recomputations

    def refresh(self, snapshot: MarketSnapshot) -> MarketState:
        """Return the derived state for ``snapshot``, recomputing only if it changed."""
        if self._state is not None and self._state.snapshot == snapshot:
            return self._state

        # Copy the maps so later in-place edits by the caller are seen as changes.
        frozen = MarketSnapshot(tokens=dict(snapshot.tokens), markets=dict(snapshot.markets))
        self._state = MarketState(
            snapshot=frozen,
            graph=build_market_graph(frozen.markets, frozen.tokens),
            options=get_available_token_options(frozen.markets, frozen.tokens),
        )
        self._recomputations += 1

        logger.info(
            "market_state_recomputed",
            tokens=len(frozen.tokens),
            markets=len(frozen.markets),
            swap_tokens=len(self._state.options.swap_tokens),
            index_tokens=len(self._state.options.index_tokens),
        )
        return self._state
