"""Hop-bounded shortest swap path search over the market graph.

Dijkstra over ``(node, hops)`` states: a state is only expanded while
``hops < max_hops``, so every returned path has at most ``max_hops`` edges
and the search terminates in time proportional to the number of edges times
the hop bound. A node settled with fewer hops dominates any later state of
the same node, because heap order guarantees its cost is not higher.

Routing failures are not errors: an unknown token or an unreachable
destination yields an empty SwapPath and a warning log, and callers report
the swap as having insufficient liquidity until the next data refresh.

Tie-breaking between equal-cost routes follows heap and edge-insertion
order; callers must not rely on which of several equal routes is returned.
"""

import heapq
from collections.abc import Callable
from dataclasses import dataclass

from tradebox.exceptions import UnknownTokenError
from tradebox.logging import get_logger
from tradebox.market.graph import MarketGraph, SwapEdge

logger = get_logger(__name__)

DEFAULT_MAX_HOPS = 5

WeightFn = Callable[[SwapEdge], int | None]


def fee_weight(edge: SwapEdge) -> int:
    """Default edge weight: the rebalancing fee flag."""
    return edge.fee


@dataclass(frozen=True)
class SwapPath:
    """A swap route: visited tokens and the market edges between them.

    ``node_path`` has one more entry than ``edge_path`` for a found route.
    A route from a token to itself has a single node and no edges; a failed
    search has neither.
    """

    node_path: tuple[str, ...] = ()
    edge_path: tuple[SwapEdge, ...] = ()

    @classmethod
    def empty(cls) -> "SwapPath":
        return cls()

    @property
    def found(self) -> bool:
        return bool(self.node_path)

    @property
    def hops(self) -> int:
        return len(self.edge_path)

    @property
    def market_addresses(self) -> list[str]:
        """Market token addresses to swap through, in order."""
        return [edge.market_token_address for edge in self.edge_path]


def find_path(
    graph: MarketGraph,
    source: str,
    dest: str,
    weight_fn: WeightFn = fee_weight,
    max_hops: int = DEFAULT_MAX_HOPS,
) -> SwapPath:
    """Find the cheapest swap route from ``source`` to ``dest``.

    Args:
        graph: Market graph built for the current snapshot.
        source: Token address to swap from.
        dest: Token address to swap to.
        weight_fn: Non-negative edge weight; returning None excludes the edge.
        max_hops: Maximum number of edges in the route, capped at
            DEFAULT_MAX_HOPS.

    Returns:
        The cheapest route within ``max_hops`` (fewest hops among equal
        costs), or ``SwapPath.empty()`` if none exists.
    """
    if source == dest:
        return SwapPath(node_path=(source,), edge_path=())

    max_hops = min(max_hops, DEFAULT_MAX_HOPS)

    try:
        source_ix = graph.index_of(source)
        dest_ix = graph.index_of(dest)
    except UnknownTokenError as e:
        logger.warning("swap_route_unknown_token", source=source, dest=dest, error=str(e))
        return SwapPath.empty()

    # Fewest hops at which each node was settled.
    settled_hops: list[int | None] = [None] * graph.node_count
    costs: dict[tuple[int, int], int] = {(source_ix, 0): 0}
    predecessors: dict[tuple[int, int], tuple[int, int, SwapEdge]] = {}
    heap: list[tuple[int, int, int]] = [(0, 0, source_ix)]

    while heap:
        cost, hops, ix = heapq.heappop(heap)

        settled = settled_hops[ix]
        if settled is not None and settled <= hops:
            continue
        settled_hops[ix] = hops

        if ix == dest_ix:
            return _reconstruct(graph, predecessors, source_ix, dest_ix, hops)

        if hops >= max_hops:
            continue

        next_hops = hops + 1
        for edge in graph.adjacency[ix]:
            weight = weight_fn(edge)
            if weight is None:
                continue

            target_settled = settled_hops[edge.to_ix]
            if target_settled is not None and target_settled <= next_hops:
                continue

            state = (edge.to_ix, next_hops)
            next_cost = cost + weight
            known = costs.get(state)
            if known is None or next_cost < known:
                costs[state] = next_cost
                predecessors[state] = (ix, hops, edge)
                heapq.heappush(heap, (next_cost, next_hops, edge.to_ix))

    logger.warning(
        "swap_route_not_found",
        source=source,
        dest=dest,
        max_hops=max_hops,
    )
    return SwapPath.empty()


def _reconstruct(
    graph: MarketGraph,
    predecessors: dict[tuple[int, int], tuple[int, int, SwapEdge]],
    source_ix: int,
    dest_ix: int,
    hops: int,
) -> SwapPath:
    edges: list[SwapEdge] = []
    state = (dest_ix, hops)
    while state != (source_ix, 0):
        prev_ix, prev_hops, edge = predecessors[state]
        edges.append(edge)
        state = (prev_ix, prev_hops)
    edges.reverse()

    nodes = [graph.address_of(source_ix)]
    nodes.extend(edge.to_token_address for edge in edges)
    return SwapPath(node_path=tuple(nodes), edge_path=tuple(edges))
