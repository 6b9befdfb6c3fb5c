"""Data models for contract deployment."""

from chaindeploy.model.config import ChainConfig, MetadataStore
from chaindeploy.model.state import (
    DeployError,
    DeploymentRequest,
    GateClosed,
    InputType,
    Rejected,
    WizardFields,
    WizardState,
    WizardStep,
)

__all__ = [
    "ChainConfig",
    "MetadataStore",
    "DeployError",
    "DeploymentRequest",
    "GateClosed",
    "InputType",
    "Rejected",
    "WizardFields",
    "WizardState",
    "WizardStep",
]
