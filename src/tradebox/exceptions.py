"""Custom exceptions for the trade routing engine.

None of these escape the public query surface: routing, selection and
persistence failures are caught at their seams and degraded to an empty
route, ``None`` or default options.
"""


class TradeBoxError(Exception):
    """Base exception for all trade box errors."""


class UnknownTokenError(TradeBoxError):
    """Raised when a token address is not a node of the market graph."""


class StorageError(TradeBoxError):
    """Raised when persisted trade options cannot be read or written."""
