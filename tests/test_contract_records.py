"""Tests for the local metadata store and contract operations."""

import pytest

from chaindeploy.backends.metadata import LocalMetadataBackend
from chaindeploy.contract_ops import get_contract_summary, list_contracts, load_contract
from chaindeploy.model.validation import ChainDeployError
from conftest import CONTRACT, OTHER


def _record(base_dir, address, name, timestamp, deleted=False):
    store = LocalMetadataBackend(base_dir)
    store.set_account_name(address, name)
    store.set_account_meta(
        address,
        {
            "abi": [],
            "contract": True,
            "timestamp": timestamp,
            "deleted": deleted,
            "source": "",
            "description": f"{name} contract",
        },
    )


class TestLocalMetadataBackend:
    def test_name_and_meta_merge_into_one_record(self, tmp_path):
        _record(tmp_path, CONTRACT, "Token", 1700000000000)
        record = LocalMetadataBackend(tmp_path).load(CONTRACT)
        assert record.address == CONTRACT
        assert record.name == "Token"
        assert record.meta["contract"] is True

    def test_lookup_is_case_insensitive(self, tmp_path):
        _record(tmp_path, CONTRACT, "Token", 1)
        assert LocalMetadataBackend(tmp_path).load(CONTRACT.upper().replace("0X", "0x")).name == "Token"

    def test_missing_record(self, tmp_path):
        with pytest.raises(ChainDeployError) as exc_info:
            load_contract(CONTRACT, tmp_path)
        assert exc_info.value.code == "CONTRACT_NOT_FOUND"


    def test_corrupt_record(self, tmp_path):
        store = LocalMetadataBackend(tmp_path)
        store.contracts_dir.mkdir(parents=True)
        store.record_path(CONTRACT).write_text("{not json")
        with pytest.raises(ChainDeployError) as exc_info:
            store.load(CONTRACT)
        assert exc_info.value.code == "CONTRACT_INVALID"

    def test_corrupt_record_not_overwritten(self, tmp_path):
        store = LocalMetadataBackend(tmp_path)
        store.contracts_dir.mkdir(parents=True)
        store.record_path(CONTRACT).write_text("{not json")
        with pytest.raises(ChainDeployError):
            store.set_account_name(CONTRACT, "Token")
        assert store.record_path(CONTRACT).read_text() == "{not json"

class TestListContracts:
    def test_empty(self, tmp_path):
        assert list_contracts(tmp_path) == []

    def test_newest_first_and_deleted_hidden(self, tmp_path):
        _record(tmp_path, CONTRACT, "Older", 1000)
        _record(tmp_path, OTHER, "Newer", 2000)
        _record(tmp_path, "0x" + "11" * 20, "Gone", 3000, deleted=True)

        assert [r.name for r in list_contracts(tmp_path)] == ["Newer", "Older"]

    def test_unreadable_records_skipped(self, tmp_path):
        _record(tmp_path, CONTRACT, "Token", 1000)
        store = LocalMetadataBackend(tmp_path)
        store.record_path(OTHER).write_text("{not json")
        store.record_path("0x" + "22" * 20).write_text('{"name": "no address"}')

        assert [r.name for r in list_contracts(tmp_path)] == ["Token"]


class TestContractSummary:
    def test_summary(self, tmp_path):
        _record(tmp_path, CONTRACT, "Token", 1700000000000)
        summary = get_contract_summary(load_contract(CONTRACT, tmp_path))
        assert summary == {
            "address": CONTRACT,
            "name": "Token",
            "deployed": "2023-11-14 22:13",
            "description": "Token contract",
        }
