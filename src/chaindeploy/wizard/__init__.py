"""Interactive wizard for contract deployment."""

from chaindeploy.wizard.controller import WizardController
from chaindeploy.wizard.flow import run_wizard
from chaindeploy.wizard.tracker import (
    EVENT_PHASES,
    PHASE_MESSAGES,
    DeploymentPhase,
    DeploymentTracker,
)

__all__ = [
    "run_wizard",
    "WizardController",
    "DeploymentTracker",
    "DeploymentPhase",
    "EVENT_PHASES",
    "PHASE_MESSAGES",
]
