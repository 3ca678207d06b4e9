"""Persistence of trade options.

Defines the typed storage key, the versioned on-disk schema and the storage
backends. Backends only move opaque JSON-compatible dicts; conversion to and
from TradeOptions goes through TradeOptionsRecord so a stored blob from an
incompatible version fails validation instead of producing a half-valid
state.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

from tradebox.config import StorageSettings
from tradebox.exceptions import StorageError
from tradebox.logging import get_logger
from tradebox.models import PinnedMarkets, SelectedTokens, TradeMode, TradeOptions, TradeType

logger = get_logger(__name__)

SCHEMA_VERSION = 1


@dataclass(frozen=True)
class TradeOptionsKey:
    """Identifies one persisted trade options value (one per network)."""

    chain_id: str
    namespace: str = "trade-options"
    version: int = SCHEMA_VERSION

    @property
    def storage_key(self) -> str:
        return f"{self.namespace}.v{self.version}.{self.chain_id}"


class PinnedMarketsRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    long_market_address: str | None = None
    short_market_address: str | None = None


class SelectedTokensRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    from_token_address: str | None = None
    index_token_address: str | None = None
    swap_to_token_address: str | None = None


class TradeOptionsRecord(BaseModel):
    """Versioned serialized form of TradeOptions."""

    model_config = ConfigDict(extra="forbid")

    version: Literal[1] = SCHEMA_VERSION
    trade_type: TradeType = TradeType.LONG
    trade_mode: TradeMode = TradeMode.MARKET
    tokens: SelectedTokensRecord = SelectedTokensRecord()
    markets: dict[str, PinnedMarketsRecord] = {}
    collateral_address: str | None = None

    @classmethod
    def from_options(cls, options: TradeOptions) -> "TradeOptionsRecord":
        return cls(
            trade_type=options.trade_type,
            trade_mode=options.trade_mode,
            tokens=SelectedTokensRecord(
                from_token_address=options.tokens.from_token_address,
                index_token_address=options.tokens.index_token_address,
                swap_to_token_address=options.tokens.swap_to_token_address,
            ),
            markets={
                address: PinnedMarketsRecord(
                    long_market_address=pinned.long_market_address,
                    short_market_address=pinned.short_market_address,
                )
                for address, pinned in options.markets.items()
            },
            collateral_address=options.collateral_address,
        )

    def to_options(self) -> TradeOptions:
        return TradeOptions(
            trade_type=self.trade_type,
            trade_mode=self.trade_mode,
            tokens=SelectedTokens(
                from_token_address=self.tokens.from_token_address,
                index_token_address=self.tokens.index_token_address,
                swap_to_token_address=self.tokens.swap_to_token_address,
            ),
            markets={
                address: PinnedMarkets(
                    long_market_address=pinned.long_market_address,
                    short_market_address=pinned.short_market_address,
                )
                for address, pinned in self.markets.items()
            },
            collateral_address=self.collateral_address,
        )


class TradeOptionsStorage(ABC):
    """Abstract persistence backend for trade options blobs."""

    @abstractmethod
    def load(self, key: TradeOptionsKey) -> dict | None:
        """Return the stored blob, or None if nothing is stored.

        Raises:
            StorageError: If a stored blob exists but cannot be read.
        """
        ...

    @abstractmethod
    def save(self, key: TradeOptionsKey, value: dict) -> None:
        """Store a blob, replacing any previous value."""
        ...


class InMemoryStorage(TradeOptionsStorage):
    """Process-local storage. Blobs are copied through JSON on the way in and out."""

    def __init__(self) -> None:
        self._blobs: dict[str, str] = {}

    def load(self, key: TradeOptionsKey) -> dict | None:
        raw = self._blobs.get(key.storage_key)
        if raw is None:
            return None
        return json.loads(raw)

    def save(self, key: TradeOptionsKey, value: dict) -> None:
        self._blobs[key.storage_key] = json.dumps(value)


class JsonFileStorage(TradeOptionsStorage):
    """One JSON file per key under a directory, replaced atomically on save."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    def _path(self, key: TradeOptionsKey) -> Path:
        return self._directory / f"{key.storage_key}.json"

    def load(self, key: TradeOptionsKey) -> dict | None:
        path = self._path(key)
        if not path.exists():
            return None

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"Unexpected content in {path}")
        return data

    def save(self, key: TradeOptionsKey, value: dict) -> None:
        path = self._path(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self._directory, suffix=".tmp")
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            Path(tmp_path).unlink(missing_ok=True)
            raise StorageError(f"Cannot write {path}: {e}") from e

        logger.debug("trade_options_saved", path=str(path))


def create_storage(settings: StorageSettings) -> TradeOptionsStorage:
    """Build the storage backend selected in settings."""
    if settings.backend == "json":
        return JsonFileStorage(settings.directory)
    return InMemoryStorage()
