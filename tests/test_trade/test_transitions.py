"""Tests for the pure TradeOptions transitions."""

from tradebox.models import PinnedMarkets, SelectedTokens, TradeMode, TradeOptions, TradeType
from tradebox.trade.transitions import (
    TradeParams,
    pin_market,
    with_collateral,
    with_from_token,
    with_switched_tokens,
    with_to_token,
    with_trade_mode,
    with_trade_params,
    with_trade_type,
)


def _make_options(trade_type: TradeType = TradeType.LONG) -> TradeOptions:
    return TradeOptions(
        trade_type=trade_type,
        tokens=SelectedTokens(
            from_token_address="usdc",
            index_token_address="wsol",
            swap_to_token_address="eth",
        ),
    )


class TestNoOpTransitions:
    def test_same_value_returns_same_instance(self) -> None:
        options = _make_options()

        assert with_trade_type(options, TradeType.LONG) is options
        assert with_trade_mode(options, TradeMode.MARKET) is options
        assert with_from_token(options, "usdc") is options
        assert with_to_token(options, "wsol") is options
        assert with_trade_params(options, TradeParams()) is options

    def test_input_is_never_mutated(self) -> None:
        options = _make_options()
        with_trade_type(options, TradeType.SWAP)
        with_collateral(options, "wsol")

        assert options == _make_options()


class TestSimpleSetters:
    def test_trade_type(self) -> None:
        assert with_trade_type(_make_options(), TradeType.SHORT).trade_type == TradeType.SHORT

    def test_trade_mode(self) -> None:
        assert with_trade_mode(_make_options(), TradeMode.LIMIT).trade_mode == TradeMode.LIMIT

    def test_from_token(self) -> None:
        assert with_from_token(_make_options(), "wsol").tokens.from_token_address == "wsol"

    def test_collateral(self) -> None:
        assert with_collateral(_make_options(), "usdc").collateral_address == "usdc"


class TestPinMarket:
    def test_pins_one_side_only(self) -> None:
        options = pin_market(_make_options(), "wsol", TradeType.SHORT, "gm-sol")

        assert options.markets["wsol"] == PinnedMarkets(short_market_address="gm-sol")

    def test_keeps_other_side(self) -> None:
        options = pin_market(_make_options(), "wsol", TradeType.LONG, "gm-a")
        options = pin_market(options, "wsol", TradeType.SHORT, "gm-b")

        assert options.markets["wsol"] == PinnedMarkets("gm-a", "gm-b")

    def test_swap_does_not_pin(self) -> None:
        options = _make_options()
        assert pin_market(options, "wsol", TradeType.SWAP, "gm-sol") is options


class TestToToken:
    def test_position_sets_index_token_and_pins(self) -> None:
        options = with_to_token(_make_options(), "eth", market_address="gm-eth")

        assert options.tokens.index_token_address == "eth"
        assert options.market_address == "gm-eth"

    def test_swap_sets_swap_destination(self) -> None:
        options = with_to_token(_make_options(TradeType.SWAP), "btc", market_address="gm-btc")

        assert options.tokens.swap_to_token_address == "btc"
        assert options.tokens.index_token_address == "wsol"
        assert options.markets == {}

    def test_new_trade_type_decides_the_slot(self) -> None:
        options = with_to_token(_make_options(TradeType.LONG), "btc", trade_type=TradeType.SWAP)

        assert options.trade_type == TradeType.SWAP
        assert options.tokens.swap_to_token_address == "btc"
        assert options.tokens.index_token_address == "wsol"


class TestTradeParams:
    def test_applies_all_fields_at_once(self) -> None:
        params = TradeParams(
            trade_type=TradeType.SHORT,
            trade_mode=TradeMode.LIMIT,
            from_token_address="wsol",
            to_token_address="eth",
            market_address="gm-eth",
            collateral_address="usdc",
        )
        options = with_trade_params(_make_options(), params)

        assert options.trade_type == TradeType.SHORT
        assert options.trade_mode == TradeMode.LIMIT
        assert options.tokens.from_token_address == "wsol"
        assert options.tokens.index_token_address == "eth"
        assert options.markets["eth"].short_market_address == "gm-eth"
        assert options.collateral_address == "usdc"

    def test_market_is_pinned_for_new_trade_type(self) -> None:
        params = TradeParams(trade_type=TradeType.SHORT, to_token_address="wsol", market_address="gm-sol")
        options = with_trade_params(_make_options(), params)

        assert options.markets["wsol"] == PinnedMarkets(short_market_address="gm-sol")


    def test_market_alone_pins_current_index_token(self) -> None:
        options = with_trade_params(_make_options(), TradeParams(market_address="gm-sol"))
        assert options.market_address == "gm-sol"

    def test_market_alone_is_ignored_for_swaps(self) -> None:
        options = _make_options(TradeType.SWAP)
        assert with_trade_params(options, TradeParams(market_address="gm-sol")) is options


class TestSwitchTokens:
    def test_position_switches_from_and_index(self) -> None:
        options = with_switched_tokens(_make_options())

        assert options.tokens.from_token_address == "wsol"
        assert options.tokens.index_token_address == "usdc"
        assert options.tokens.swap_to_token_address == "eth"

    def test_swap_switches_from_and_destination(self) -> None:
        options = with_switched_tokens(_make_options(TradeType.SWAP))

        assert options.tokens.from_token_address == "eth"
        assert options.tokens.swap_to_token_address == "usdc"
        assert options.tokens.index_token_address == "wsol"

    def test_switching_twice_restores(self) -> None:
        options = _make_options(TradeType.SWAP)
        assert with_switched_tokens(with_switched_tokens(options)) == options
