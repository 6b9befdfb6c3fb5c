"""Chain and metadata backends for contract deployment."""

from pathlib import Path

from chaindeploy.backends.base import (
    REQUEST_REJECTED,
    DeployBackend,
    DeploymentFailure,
    DeployOptions,
    MetadataBackend,
    ProgressCallback,
    ProgressEvent,
)
from chaindeploy.model.config import ChainConfig, MetadataStore


def get_backend(config: ChainConfig) -> DeployBackend:
    """Get the deploy backend for a configuration.

    Args:
        config: Chain connection settings

    Returns:
        Backend with accounts and deploy methods
    """
    from chaindeploy.backends.web3_rpc import Web3Backend

    return Web3Backend(config)


def get_metadata_backend(
    config: ChainConfig,
    backend: DeployBackend | None = None,
    base_dir: Path | None = None,
) -> MetadataBackend:
    """Get the metadata backend selected by ``config.metadata_store``.

    The node store reuses the web3 connection of ``backend`` when one is given.
    """
    if config.metadata_store == MetadataStore.NODE:
        from web3 import Web3

        from chaindeploy.backends.metadata import NodeMetadataBackend

        w3 = getattr(backend, "w3", None)
        if w3 is None:
            w3 = Web3(Web3.HTTPProvider(config.rpc_url, request_kwargs={"timeout": config.request_timeout}))
        return NodeMetadataBackend(w3)

    from chaindeploy.backends.metadata import LocalMetadataBackend

    return LocalMetadataBackend(base_dir)


__all__ = [
    "REQUEST_REJECTED",
    "DeployBackend",
    "DeploymentFailure",
    "DeployOptions",
    "MetadataBackend",
    "ProgressCallback",
    "ProgressEvent",
    "get_backend",
    "get_metadata_backend",
]
