"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from tradebox.config import AppSettings, RoutingSettings, StorageSettings


class TestDefaults:
    def test_routing_defaults(self) -> None:
        assert RoutingSettings().max_swap_hops == 5

    def test_storage_defaults(self) -> None:
        settings = StorageSettings()
        assert settings.backend == "memory"
        assert settings.directory == "data/trade_options"

    def test_app_defaults(self) -> None:
        settings = AppSettings(_env_file=None)
        assert settings.chain_id == "mainnet"
        assert settings.log_format == "console"


class TestEnvironment:
    def test_routing_prefix(self, monkeypatch) -> None:
        monkeypatch.setenv("ROUTING_MAX_SWAP_HOPS", "3")
        assert RoutingSettings().max_swap_hops == 3

    @pytest.mark.parametrize("value", ["6", "8", "0"])
    def test_hop_bound_outside_range_is_rejected(self, monkeypatch, value: str) -> None:
        monkeypatch.setenv("ROUTING_MAX_SWAP_HOPS", value)

        with pytest.raises(ValidationError):
            RoutingSettings()

    def test_storage_prefix(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("STORAGE_BACKEND", "json")
        monkeypatch.setenv("STORAGE_DIRECTORY", str(tmp_path))

        settings = StorageSettings()
        assert settings.backend == "json"
        assert settings.directory == str(tmp_path)

    def test_nested_delimiter(self, monkeypatch) -> None:
        monkeypatch.setenv("CHAIN_ID", "devnet")
        monkeypatch.setenv("STORAGE__BACKEND", "json")

        settings = AppSettings(_env_file=None)
        assert settings.chain_id == "devnet"
        assert settings.storage.backend == "json"
