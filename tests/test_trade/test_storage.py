"""Tests for trade options persistence -- keys, records and backends."""

import json
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from tradebox.config import StorageSettings
from tradebox.exceptions import StorageError
from tradebox.models import PinnedMarkets, SelectedTokens, TradeMode, TradeOptions, TradeType
from tradebox.trade.storage import (
    InMemoryStorage,
    JsonFileStorage,
    TradeOptionsKey,
    TradeOptionsRecord,
    create_storage,
)


def _make_options() -> TradeOptions:
    return TradeOptions(
        trade_type=TradeType.SHORT,
        trade_mode=TradeMode.LIMIT,
        tokens=SelectedTokens(
            from_token_address="usdc",
            index_token_address="wsol",
            swap_to_token_address="eth",
        ),
        markets={"wsol": PinnedMarkets(long_market_address="gm-sol", short_market_address="gm-sol-2")},
        collateral_address="usdc",
    )


class TestTradeOptionsKey:
    def test_storage_key_includes_version_and_chain(self) -> None:
        assert TradeOptionsKey("mainnet").storage_key == "trade-options.v1.mainnet"

    def test_keys_are_per_chain(self) -> None:
        assert TradeOptionsKey("a").storage_key != TradeOptionsKey("b").storage_key


class TestTradeOptionsRecord:
    def test_record_preserves_options(self) -> None:
        options = _make_options()
        assert TradeOptionsRecord.from_options(options).to_options() == options

    def test_dumped_record_is_plain_json(self) -> None:
        data = TradeOptionsRecord.from_options(_make_options()).model_dump(mode="json")

        assert data["version"] == 1
        assert data["trade_type"] == "Short"
        assert data["markets"]["wsol"]["short_market_address"] == "gm-sol-2"
        json.dumps(data)

    def test_unknown_version_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TradeOptionsRecord.model_validate({"version": 2})

    def test_unknown_fields_are_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TradeOptionsRecord.model_validate({"version": 1, "leverage": 3})

    def test_empty_blob_gives_defaults(self) -> None:
        assert TradeOptionsRecord.model_validate({}).to_options() == TradeOptions()


class TestInMemoryStorage:
    def test_missing_key(self) -> None:
        assert InMemoryStorage().load(TradeOptionsKey("mainnet")) is None

    def test_save_then_load(self) -> None:
        storage = InMemoryStorage()
        key = TradeOptionsKey("mainnet")
        storage.save(key, {"trade_type": "Swap"})

        assert storage.load(key) == {"trade_type": "Swap"}
        assert storage.load(TradeOptionsKey("devnet")) is None

    def test_loaded_blob_is_a_copy(self) -> None:
        storage = InMemoryStorage()
        key = TradeOptionsKey("mainnet")
        storage.save(key, {"markets": {}})

        storage.load(key)["markets"]["x"] = 1
        assert storage.load(key) == {"markets": {}}


class TestJsonFileStorage:
    def test_missing_file(self, tmp_path) -> None:
        assert JsonFileStorage(tmp_path).load(TradeOptionsKey("mainnet")) is None

    def test_save_creates_directory_and_file(self, tmp_path) -> None:
        directory = tmp_path / "nested" / "store"
        storage = JsonFileStorage(directory)
        key = TradeOptionsKey("mainnet")
        blob = TradeOptionsRecord.from_options(_make_options()).model_dump(mode="json")

        storage.save(key, blob)

        assert (directory / "trade-options.v1.mainnet.json").exists()
        assert storage.load(key) == blob
        assert not list(directory.glob("*.tmp"))

    def test_corrupt_file_raises(self, tmp_path) -> None:
        (tmp_path / "trade-options.v1.mainnet.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageError):
            JsonFileStorage(tmp_path).load(TradeOptionsKey("mainnet"))

    def test_unserializable_value_leaves_no_temp_file(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path)
        key = TradeOptionsKey("mainnet")
        storage.save(key, {"trade_type": "Long"})

        with pytest.raises(StorageError):
            storage.save(key, {"trade_type": object()})

        assert not list(tmp_path.glob("*.tmp"))
        assert storage.load(key) == {"trade_type": "Long"}

    def test_failed_replace_leaves_no_temp_file(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path)

        with patch("tradebox.trade.storage.os.replace", side_effect=OSError("busy")):
            with pytest.raises(StorageError):
                storage.save(TradeOptionsKey("mainnet"), {"trade_type": "Long"})

        assert list(tmp_path.iterdir()) == []

    def test_non_object_content_raises(self, tmp_path) -> None:
        (tmp_path / "trade-options.v1.mainnet.json").write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(StorageError):
            JsonFileStorage(tmp_path).load(TradeOptionsKey("mainnet"))


class TestCreateStorage:
    def test_memory_backend_by_default(self) -> None:
        assert isinstance(create_storage(StorageSettings()), InMemoryStorage)

    def test_json_backend(self, tmp_path) -> None:
        storage = create_storage(StorageSettings(backend="json", directory=str(tmp_path)))
        assert isinstance(storage, JsonFileStorage)
