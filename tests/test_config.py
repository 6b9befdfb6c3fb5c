"""Tests for node configuration."""

import pytest

from chaindeploy.model.config import (
    ChainConfig,
    MetadataStore,
    config_path,
    load_config,
    save_config,
    update_config,
)
from chaindeploy.model.validation import ChainDeployError


class TestLoadSave:
    def test_defaults_without_file(self, tmp_path):
        config = load_config(tmp_path)
        assert config == ChainConfig()
        assert config.rpc_url == "http://127.0.0.1:8545"
        assert config.metadata_store == MetadataStore.LOCAL

    def test_round_trip(self, tmp_path):
        path = save_config(ChainConfig(rpc_url="http://node:8545", metadata_store="node"), tmp_path)
        assert path == config_path(tmp_path)
        config = load_config(tmp_path)
        assert config.rpc_url == "http://node:8545"
        assert config.metadata_store == MetadataStore.NODE

    def test_invalid_file(self, tmp_path):
        path = config_path(tmp_path)
        path.parent.mkdir(parents=True)
        path.write_text('{"poll_interval": -1}')
        with pytest.raises(ChainDeployError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code == "CONFIG_INVALID"


class TestUpdateConfig:
    def test_updates_and_persists(self, tmp_path):
        update_config("poll_interval", "2.5", tmp_path)
        assert load_config(tmp_path).poll_interval == 2.5

    def test_unknown_key(self, tmp_path):
        with pytest.raises(ChainDeployError) as exc_info:
            update_config("gas_price", "1", tmp_path)
        assert exc_info.value.code == "CONFIG_KEY_UNKNOWN"

    def test_invalid_value(self, tmp_path):
        with pytest.raises(ChainDeployError) as exc_info:
            update_config("metadata_store", "cloud", tmp_path)
        assert exc_info.value.code == "CONFIG_INVALID"
        assert not config_path(tmp_path).exists()
