"""Backends recording names and metadata of deployed contracts."""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError
from web3 import Web3
from web3.exceptions import Web3RPCError

from chaindeploy.model.validation import ChainDeployError

CONTRACTS_DIR = Path(".chaindeploy") / "contracts"


class ContractRecord(BaseModel):
    """Name and metadata recorded for a deployed contract."""

    address: str
    name: str | None = Field(default=None)
    meta: dict[str, Any] = Field(default_factory=dict)


class NodeMetadataBackend:
    """Record metadata in the node's address book (parity RPC extensions)."""

    def __init__(self, w3: Web3) -> None:
        self.w3 = w3

    def _request(self, method: str, params: list[Any]) -> None:
        try:
            self.w3.manager.request_blocking(method, params)
        except Web3RPCError as e:
            raise ChainDeployError("METADATA_FAILED", f"{method} failed: {e}") from e

    def set_account_name(self, address: str, name: str) -> None:
        self._request("parity_setAccountName", [address, name])

    def set_account_meta(self, address: str, meta: dict[str, Any]) -> None:
        # parity stores metadata as a JSON string
        self._request("parity_setAccountMeta", [address, json.dumps(meta)])


class LocalMetadataBackend:
    """Record metadata as JSON files under ``.chaindeploy/contracts``."""

    def __init__(self, base_dir: Path | None = None) -> None:
        if base_dir is None:
            base_dir = Path.cwd()
        self.contracts_dir = base_dir / CONTRACTS_DIR

    def record_path(self, address: str) -> Path:
        """Return the file holding the record for ``address``."""
        return self.contracts_dir / f"{address.lower()}.json"

    def load(self, address: str) -> ContractRecord:
        """Load the record for an address.

        Raises:
            ChainDeployError: If no record exists (CONTRACT_NOT_FOUND) or the
                record file cannot be read (CONTRACT_INVALID).
        """
        path = self.record_path(address)
        if not path.exists():
            raise ChainDeployError("CONTRACT_NOT_FOUND", f"No contract recorded at {address}")
        try:
            with path.open() as f:
                data = json.load(f)
            return ContractRecord(**data)
        except (ValueError, TypeError, PydanticValidationError) as e:
            raise ChainDeployError("CONTRACT_INVALID", f"Cannot read {path}: {e}") from e

    def _save(self, record: ContractRecord) -> Path:
        self.contracts_dir.mkdir(parents=True, exist_ok=True)
        path = self.record_path(record.address)
        with path.open("w") as f:
            json.dump(record.model_dump(), f, indent=2)
        return path

    def _load_or_new(self, address: str) -> ContractRecord:
        try:
            return self.load(address)
        except ChainDeployError as e:
            if e.code != "CONTRACT_NOT_FOUND":
                raise
            return ContractRecord(address=address)

    def set_account_name(self, address: str, name: str) -> None:
        record = self._load_or_new(address)
        self._save(record.model_copy(update={"name": name}))

    def set_account_meta(self, address: str, meta: dict[str, Any]) -> None:
        record = self._load_or_new(address)
        self._save(record.model_copy(update={"meta": meta}))
