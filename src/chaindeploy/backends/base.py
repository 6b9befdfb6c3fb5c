"""Shared types for chain and metadata backends."""

from typing import Any, Callable, Protocol

from pydantic import BaseModel, Field

# JSON-RPC error code returned by the signer when the user declines a request
REQUEST_REJECTED = -32040

# Deployment lifecycle event names emitted by backends, in their usual order
ESTIMATE_GAS = "estimateGas"
POST_TRANSACTION = "postTransaction"
CHECK_REQUEST = "checkRequest"
GET_TRANSACTION_RECEIPT = "getTransactionReceipt"
HAS_RECEIPT = "hasReceipt"
GET_CODE = "getCode"
COMPLETED = "completed"


class DeployOptions(BaseModel):
    """Transaction options for a contract creation."""

    bytecode: str
    from_address: str


class ProgressEvent(BaseModel):
    """One lifecycle event reported while a deployment is in flight."""

    state: str
    txhash: str | None = Field(default=None)


ProgressCallback = Callable[[Exception | None, ProgressEvent | None], None]


class DeploymentFailure(Exception):
    """Deployment failure reported by a backend.

    ``code`` holds the JSON-RPC error code when the node supplied one.
    """

    def __init__(self, message: str, code: int | None = None) -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class DeployBackend(Protocol):
    """Chain interface used to deploy contracts."""

    def accounts(self) -> dict[str, dict[str, Any]]:
        """Return accounts available for signing, keyed by address."""
        ...

    def deploy(
        self,
        abi: list[dict[str, Any]],
        options: DeployOptions,
        params: list[Any],
        on_progress: ProgressCallback,
    ) -> str:
        """Deploy a contract and return its address."""
        ...


class MetadataBackend(Protocol):
    """Store for human-readable names and metadata of addresses."""

    def set_account_name(self, address: str, name: str) -> None:
        """Assign a name to an address."""
        ...

    def set_account_meta(self, address: str, meta: dict[str, Any]) -> None:
        """Attach structured metadata to an address."""
        ...
