"""Shared test fixtures for the trade routing engine.

Prices are USD per whole token with USD_DECIMALS decimals; pool amounts
are raw token amounts.
"""

import pytest

from tradebox.config import AppSettings, RoutingSettings, StorageSettings
from tradebox.models import ONE_USD, Market, MarketSnapshot, Token


def _token(address: str, symbol: str, decimals: int, price_usd: int, **kwargs) -> Token:
    return Token(
        address=address,
        symbol=symbol,
        decimals=decimals,
        min_price=price_usd * ONE_USD,
        max_price=price_usd * ONE_USD,
        **kwargs,
    )


@pytest.fixture
def tokens() -> dict[str, Token]:
    """SOL (native + wrapped), USDC, ETH and BTC at round prices."""
    token_list = [
        _token("sol", "SOL", 9, 100, is_native=True, wrapped_address="wsol"),
        _token("wsol", "WSOL", 9, 100, is_wrapped=True, wrapped_address="sol"),
        _token("usdc", "USDC", 6, 1),
        _token("eth", "ETH", 18, 2000),
        _token("btc", "BTC", 8, 50000),
    ]
    return {t.address: t for t in token_list}


@pytest.fixture
def markets() -> dict[str, Market]:
    """Three markets: WSOL/USDC, ETH/USDC and single-collateral BTC/BTC.

    Pool values:
      gm-sol: long $1,000,000 (10,000 WSOL), short $100,000 USDC
      gm-eth: long $200,000 (100 ETH),       short $300,000 USDC
      gm-btc: long $500,000 (10 BTC),        short $500,000 (10 BTC)
    """
    market_list = [
        Market(
            market_token_address="gm-sol",
            index_token_address="wsol",
            long_token_address="wsol",
            short_token_address="usdc",
            long_pool_amount=10_000 * 10**9,
            short_pool_amount=100_000 * 10**6,
        ),
        Market(
            market_token_address="gm-eth",
            index_token_address="eth",
            long_token_address="eth",
            short_token_address="usdc",
            long_pool_amount=100 * 10**18,
            short_pool_amount=300_000 * 10**6,
        ),
        Market(
            market_token_address="gm-btc",
            index_token_address="btc",
            long_token_address="btc",
            short_token_address="btc",
            long_pool_amount=10 * 10**8,
            short_pool_amount=10 * 10**8,
        ),
    ]
    return {m.market_token_address: m for m in market_list}


@pytest.fixture
def snapshot(tokens: dict[str, Token], markets: dict[str, Market]) -> MarketSnapshot:
    return MarketSnapshot(tokens=tokens, markets=markets)


@pytest.fixture
def mock_settings(tmp_path) -> AppSettings:
    """Return AppSettings with test defaults (JSON storage in a temp dir)."""
    return AppSettings(
        log_level="DEBUG",
        chain_id="testnet",
        routing=RoutingSettings(max_swap_hops=5),
        storage=StorageSettings(backend="json", directory=str(tmp_path / "trade_options")),
    )
