"""Deployment tracking: progress phases and terminal outcome classification."""

import logging
import time
from enum import Enum
from typing import Any, Callable, Protocol

from chaindeploy.backends.base import (
    REQUEST_REJECTED,
    DeployBackend,
    DeployOptions,
    MetadataBackend,
    ProgressEvent,
)
from chaindeploy.model.state import DeploymentRequest
from chaindeploy.model.validation import ChainDeployError

logger = logging.getLogger(__name__)


class DeploymentPhase(str, Enum):
    """Coarse stages of an in-flight deployment."""

    ESTIMATING = "estimating"
    AWAITING_CONFIRMATION = "awaiting-confirmation"
    AWAITING_RECEIPT = "awaiting-receipt"
    VALIDATING_CODE = "validating-code"
    DONE = "done"


PHASE_MESSAGES: dict[DeploymentPhase, str] = {
    DeploymentPhase.ESTIMATING: "Preparing transaction for network transmission",
    DeploymentPhase.AWAITING_CONFIRMATION: "Waiting for confirmation of the transaction in the secure signer",
    DeploymentPhase.AWAITING_RECEIPT: "Waiting for the contract deployment transaction receipt",
    DeploymentPhase.VALIDATING_CODE: "Validating the deployed contract code",
    DeploymentPhase.DONE: "The contract deployment has been completed",
}

# Backend lifecycle event name -> phase. Names missing here are ignored.
EVENT_PHASES: dict[str, DeploymentPhase] = {
    "estimateGas": DeploymentPhase.ESTIMATING,
    "postTransaction": DeploymentPhase.ESTIMATING,
    "checkRequest": DeploymentPhase.AWAITING_CONFIRMATION,
    "getTransactionReceipt": DeploymentPhase.AWAITING_RECEIPT,
    "hasReceipt": DeploymentPhase.VALIDATING_CODE,
    "getCode": DeploymentPhase.VALIDATING_CODE,
    "completed": DeploymentPhase.DONE,
}


class DeploymentListener(Protocol):
    """Receiver of tracker updates (the wizard controller)."""

    def deployment_progress(self, phase: DeploymentPhase, message: str, txhash: str | None) -> None: ...

    def deployment_succeeded(self, address: str) -> None: ...

    def deployment_rejected(self) -> None: ...

    def deployment_failed(self, error: Exception) -> None: ...


class ErrorReporter(Protocol):
    """Sink for deployment failures that are not user rejections."""

    def report(self, error: Exception) -> None: ...


def is_rejection(error: Exception) -> bool:
    """Check whether an error means the user declined the request."""
    return getattr(error, "code", None) == REQUEST_REJECTED


class DeploymentTracker:
    """Issue a deployment and translate its lifecycle into wizard updates.

    Exactly one of ``deployment_succeeded``, ``deployment_rejected`` or
    ``deployment_failed`` is sent to the listener per tracker.
    """

    def __init__(
        self,
        backend: DeployBackend,
        metadata: MetadataBackend,
        reporter: ErrorReporter,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.backend = backend
        self.metadata = metadata
        self.reporter = reporter
        self.clock = clock
        self._listener: DeploymentListener | None = None
        self._started = False
        self._finished = False

    def start(self, request: DeploymentRequest, listener: DeploymentListener) -> str | None:
        """Deploy ``request`` and report its outcome to ``listener``.

        Returns:
            The contract address on success, None on rejection or failure
        """
        if self._started:
            raise ChainDeployError("DEPLOYMENT_STARTED", "A deployment was already started by this tracker")
        self._started = True
        self._listener = listener

        options = DeployOptions(bytecode=request.code, from_address=request.from_address)
        try:
            address = self.backend.deploy(request.parsed_abi, options, request.params, self.on_progress)
        except Exception as error:
            self._fail(error)
            return None

        self._finished = True
        logger.info("Contract deployed at %s", address)
        listener.deployment_succeeded(address)
        self._record_metadata(request, address)
        return address

    def on_progress(self, error: Exception | None, event: ProgressEvent | None) -> None:
        """Progress callback handed to the backend."""
        if error is not None:
            logger.warning("Deployment progress error: %s", error)
            return

        if self._finished or self._listener is None:
            logger.debug("Ignoring progress event after deployment ended: %r", event)
            return

        phase = EVENT_PHASES.get(event.state) if event is not None else None
        if phase is None:
            logger.warning("Unknown contract deployment state: %r", event)
            return

        txhash = event.txhash if phase == DeploymentPhase.AWAITING_RECEIPT else None
        self._listener.deployment_progress(phase, PHASE_MESSAGES[phase], txhash)

    def _fail(self, error: Exception) -> None:
        self._finished = True
        if is_rejection(error):
            logger.info("Deployment rejected by the user")
            self._listener.deployment_rejected()
            return

        logger.error("Error deploying contract: %s", error)
        self._listener.deployment_failed(error)
        self.reporter.report(error)

    def _record_metadata(self, request: DeploymentRequest, address: str) -> None:
        """Record name and metadata for the new contract; failures are only logged."""
        meta: dict[str, Any] = {
            "abi": request.parsed_abi,
            "contract": True,
            "timestamp": int(self.clock() * 1000),
            "deleted": False,
            "source": request.source,
            "description": request.description,
        }
        self._record("name", self.metadata.set_account_name, address, request.name)
        self._record("metadata", self.metadata.set_account_meta, address, meta)

    def _record(self, label: str, call: Callable[..., None], address: str, value: Any) -> None:
        try:
            call(address, value)
        except Exception as e:
            logger.warning("Recording contract %s for %s failed: %s", label, address, e)
