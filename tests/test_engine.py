"""Tests for the memoized market state engine."""

from dataclasses import replace

from tradebox.engine import MarketStateEngine
from tradebox.models import MarketSnapshot


class TestMemoization:
    def test_first_refresh_computes(self, snapshot) -> None:
        engine = MarketStateEngine()
        state = engine.refresh(snapshot)

        assert engine.recomputations == 1
        assert engine.state is state
        assert state.graph.edge_count == 6
        assert state.options.index_tokens == ["btc", "eth", "wsol"]

    def test_equal_snapshot_returns_same_state(self, snapshot, tokens, markets) -> None:
        engine = MarketStateEngine()
        first = engine.refresh(snapshot)
        second = engine.refresh(MarketSnapshot(tokens=dict(tokens), markets=dict(markets)))

        assert second is first
        assert engine.recomputations == 1

    def test_price_change_recomputes(self, snapshot, tokens, markets) -> None:
        engine = MarketStateEngine()
        first = engine.refresh(snapshot)

        tokens["eth"] = replace(tokens["eth"], min_price=tokens["eth"].min_price * 2)
        second = engine.refresh(MarketSnapshot(tokens=tokens, markets=markets))

        assert second is not first
        assert second.graph is not first.graph
        assert engine.recomputations == 2

    def test_in_place_edit_is_a_change(self, snapshot, markets) -> None:
        engine = MarketStateEngine()
        engine.refresh(snapshot)

        del snapshot.markets["gm-btc"]
        state = engine.refresh(snapshot)

        assert engine.recomputations == 2
        assert "btc" not in state.options.index_tokens

    def test_empty_snapshot(self) -> None:
        state = MarketStateEngine().refresh(MarketSnapshot())

        assert state.graph.node_count == 0
        assert state.options.swap_tokens == []
