"""Market graph: token-to-token swap edges derived from market pools.

Every enabled market contributes exactly two directed edges, long->short and
short->long, tagged with the market token address. Nodes are token addresses
mapped to arena-style integer indices at build time so path search works on
ints instead of address strings.

Edge weights:
  capacity = USD value of the destination-side pool (what the edge can pay out)
  fee      = 1 if the edge deposits into the side that already holds more
             USD value, else 0 (edges that rebalance the pool are free)

The graph is rebuilt from scratch for every snapshot and never mutated
afterwards, so an edge's market always exists in the snapshot it came from.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

from tradebox.exceptions import UnknownTokenError
from tradebox.logging import get_logger
from tradebox.market.utils import get_pool_usd
from tradebox.models import Market, Token

logger = get_logger(__name__)


@dataclass(frozen=True)
class SwapEdge:
    """Directed swap through one market pool."""

    market_token_address: str
    from_ix: int
    to_ix: int
    from_token_address: str
    to_token_address: str
    capacity: int  # USD, USD_DECIMALS decimals
    fee: int  # 0 or 1


@dataclass
class MarketGraph:
    """Directed multigraph of swap edges keyed by integer node indices."""

    token_addresses: list[str] = field(default_factory=list)
    adjacency: list[list[SwapEdge]] = field(default_factory=list)
    _indices: dict[str, int] = field(default_factory=dict)

    def add_token(self, address: str) -> int:
        """Return the node index for ``address``, allocating one if new."""
        ix = self._indices.get(address)
        if ix is None:
            ix = len(self.token_addresses)
            self._indices[address] = ix
            self.token_addresses.append(address)
            self.adjacency.append([])
        return ix

    def add_edge(self, edge: SwapEdge) -> None:
        self.adjacency[edge.from_ix].append(edge)

    def has_token(self, address: str) -> bool:
        return address in self._indices

    def index_of(self, address: str) -> int:
        """Node index of a token address.

        Raises:
            UnknownTokenError: If no market touches the token.
        """
        try:
            return self._indices[address]
        except KeyError:
            raise UnknownTokenError(f"Token {address} is not in the market graph") from None

    def address_of(self, ix: int) -> str:
        return self.token_addresses[ix]

    def edges_from(self, address: str) -> list[SwapEdge]:
        """Outgoing edges of a token; empty for unknown tokens."""
        ix = self._indices.get(address)
        if ix is None:
            return []
        return list(self.adjacency[ix])

    def edges(self) -> Iterator[SwapEdge]:
        for outgoing in self.adjacency:
            yield from outgoing

    def market_addresses(self) -> set[str]:
        return {edge.market_token_address for edge in self.edges()}

    @property
    def node_count(self) -> int:
        return len(self.token_addresses)

    @property
    def edge_count(self) -> int:
        return sum(len(outgoing) for outgoing in self.adjacency)


def _fee(from_side_usd: int, to_side_usd: int) -> int:
    # Depositing into the already heavier side is discouraged.
    return 1 if from_side_usd > to_side_usd else 0


def build_market_graph(markets: dict[str, Market], tokens: dict[str, Token]) -> MarketGraph:
    """Build the swap graph for a set of markets.

    Disabled markets contribute no edges. Markets with empty pools still
    contribute zero-capacity edges, and single-collateral markets contribute
    two self-loop edges. Never fails: the result may be disconnected.

    Args:
        markets: Market token address -> market record.
        tokens: Token address -> token, used to value pools at min price.

    Returns:
        A new MarketGraph.
    """
    graph = MarketGraph()

    for market_address, market in markets.items():
        if market.is_disabled:
            continue

        long_ix = graph.add_token(market.long_token_address)
        short_ix = graph.add_token(market.short_token_address)

        long_usd = get_pool_usd(market, tokens, True, "min")
        short_usd = get_pool_usd(market, tokens, False, "min")

        graph.add_edge(
            SwapEdge(
                market_token_address=market_address,
                from_ix=long_ix,
                to_ix=short_ix,
                from_token_address=market.long_token_address,
                to_token_address=market.short_token_address,
                capacity=short_usd,
                fee=_fee(long_usd, short_usd),
            )
        )
        graph.add_edge(
            SwapEdge(
                market_token_address=market_address,
                from_ix=short_ix,
                to_ix=long_ix,
                from_token_address=market.short_token_address,
                to_token_address=market.long_token_address,
                capacity=long_usd,
                fee=_fee(short_usd, long_usd),
            )
        )

    logger.debug(
        "market_graph_built",
        markets=len(markets),
        nodes=graph.node_count,
        edges=graph.edge_count,
        capacity_usd=sum(edge.capacity for edge in graph.edges()),
    )
    return graph
