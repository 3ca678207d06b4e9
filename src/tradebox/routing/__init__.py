"""Swap routing -- bounded shortest path search over the market graph."""

from tradebox.routing.pathfinder import DEFAULT_MAX_HOPS, SwapPath, fee_weight, find_path

__all__ = ["DEFAULT_MAX_HOPS", "SwapPath", "fee_weight", "find_path"]
