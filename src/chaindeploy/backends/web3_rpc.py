"""Contract deployment over a JSON-RPC node with web3.py."""

import logging
import time
from typing import Any

import requests
from web3 import Web3
from web3.exceptions import TransactionNotFound, Web3RPCError

from chaindeploy.backends.base import (
    CHECK_REQUEST,
    COMPLETED,
    ESTIMATE_GAS,
    GET_CODE,
    GET_TRANSACTION_RECEIPT,
    HAS_RECEIPT,
    POST_TRANSACTION,
    DeploymentFailure,
    DeployOptions,
    ProgressCallback,
    ProgressEvent,
)
from chaindeploy.model.config import ChainConfig
from chaindeploy.model.validation import ChainDeployError

logger = logging.getLogger(__name__)


def rpc_error_code(error: Exception) -> int | None:
    """Extract the JSON-RPC error code carried by a web3 exception."""
    response = getattr(error, "rpc_response", None)
    if not isinstance(response, dict):
        return None
    rpc_error = response.get("error")
    if isinstance(rpc_error, dict):
        return rpc_error.get("code")
    return None


def _to_failure(error: Web3RPCError) -> DeploymentFailure:
    response = error.rpc_response or {}
    rpc_error = response.get("error") if isinstance(response, dict) else None
    message = rpc_error.get("message") if isinstance(rpc_error, dict) else None
    return DeploymentFailure(message or str(error), code=rpc_error_code(error))


class Web3Backend:
    """Deploy backend talking to a node through web3's HTTP provider.

    Transactions are signed by the node (its unlocked accounts or its signer), so
    ``send_transaction`` blocks until the request has been confirmed or rejected.
    """

    def __init__(self, config: ChainConfig, w3: Web3 | None = None) -> None:
        self.config = config
        self.w3 = w3 or Web3(
            Web3.HTTPProvider(config.rpc_url, request_kwargs={"timeout": config.request_timeout})
        )

    def accounts(self) -> dict[str, dict[str, Any]]:
        """Return the node's accounts keyed by address."""
        try:
            addresses = self.w3.eth.accounts
        except requests.exceptions.RequestException as e:
            raise ChainDeployError("RPC_UNAVAILABLE", f"Cannot reach node at {self.config.rpc_url}: {e}") from e
        except Web3RPCError as e:
            raise ChainDeployError("RPC_ERROR", f"eth_accounts failed: {e}") from e
        return {address: {"address": address} for address in addresses}

    def deploy(
        self,
        abi: list[dict[str, Any]],
        options: DeployOptions,
        params: list[Any],
        on_progress: ProgressCallback,
    ) -> str:
        """Deploy a contract and return its address.

        Emits estimateGas, postTransaction, checkRequest, getTransactionReceipt,
        hasReceipt, getCode and completed through ``on_progress``.

        Raises:
            DeploymentFailure: On node errors, reverted creation or missing code.
        """
        from_address = Web3.to_checksum_address(options.from_address)
        bytecode = options.bytecode if options.bytecode.startswith("0x") else f"0x{options.bytecode}"
        factory = self.w3.eth.contract(abi=abi, bytecode=bytecode)

        try:
            on_progress(None, ProgressEvent(state=ESTIMATE_GAS))
            # build_transaction estimates gas and fills fee fields
            transaction = factory.constructor(*params).build_transaction({"from": from_address})

            on_progress(None, ProgressEvent(state=POST_TRANSACTION))
            logger.debug("Posting contract creation from %s (gas=%s)", from_address, transaction.get("gas"))

            on_progress(None, ProgressEvent(state=CHECK_REQUEST))
            tx_hash = Web3.to_hex(self.w3.eth.send_transaction(transaction))
        except Web3RPCError as e:
            raise _to_failure(e) from e
        except requests.exceptions.RequestException as e:
            raise DeploymentFailure(f"Request to node at {self.config.rpc_url} failed: {e}") from e

        on_progress(None, ProgressEvent(state=GET_TRANSACTION_RECEIPT, txhash=tx_hash))
        receipt = self._wait_for_receipt(tx_hash, on_progress)

        on_progress(None, ProgressEvent(state=HAS_RECEIPT, txhash=tx_hash))
        if receipt.get("status") == 0:
            raise DeploymentFailure(f"Contract creation reverted in transaction {tx_hash}")

        address = receipt.get("contractAddress")
        if not address:
            raise DeploymentFailure(f"Receipt for {tx_hash} has no contract address")

        on_progress(None, ProgressEvent(state=GET_CODE, txhash=tx_hash))
        try:
            code = self.w3.eth.get_code(address)
        except Web3RPCError as e:
            raise _to_failure(e) from e
        except requests.exceptions.RequestException as e:
            raise DeploymentFailure(f"Request to node at {self.config.rpc_url} failed: {e}") from e
        if not code:
            raise DeploymentFailure("Contract not deployed, getCode returned 0x")

        on_progress(None, ProgressEvent(state=COMPLETED, txhash=tx_hash))
        return address

    def _wait_for_receipt(self, tx_hash: str, on_progress: ProgressCallback) -> dict[str, Any]:
        """Poll for a transaction receipt until it is mined.

        Transient transport errors are passed to ``on_progress`` and polling continues.
        """
        while True:
            try:
                return dict(self.w3.eth.get_transaction_receipt(tx_hash))
            except TransactionNotFound:
                pass
            except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
                on_progress(e, None)
            except Web3RPCError as e:
                raise _to_failure(e) from e
            time.sleep(self.config.poll_interval)
