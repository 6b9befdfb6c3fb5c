"""Wizard state model and step transitions.

Responsibilities:
  - Define the wizard steps and the form data collected along the way.
  - Gate step progression on per-field validity.

Invariants:
  - Steps only move forward: DETAILS -> PARAMETERS -> DEPLOYMENT -> COMPLETED.
  - ``deployed_address`` is set iff ``step`` is COMPLETED.
  - ``outcome`` is set at most once and freezes the wizard at DEPLOYMENT.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from chaindeploy.model.validation import ERRORS


class WizardStep(str, Enum):
    """Wizard steps in their fixed order."""

    DETAILS = "details"
    PARAMETERS = "parameters"
    DEPLOYMENT = "deployment"
    COMPLETED = "completed"


STEP_ORDER = [WizardStep.DETAILS, WizardStep.PARAMETERS, WizardStep.DEPLOYMENT, WizardStep.COMPLETED]

STEP_TITLES = {
    WizardStep.DETAILS: "contract details",
    WizardStep.PARAMETERS: "contract parameters",
    WizardStep.DEPLOYMENT: "deployment",
    WizardStep.COMPLETED: "completed",
}


class InputType(str, Enum):
    """How the ABI and bytecode are supplied."""

    MANUAL = "manual"  # ABI and bytecode entered directly
    SOLC = "solc"  # parsed from solc --combined-json output


# Fields whose errors must all be clear before leaving a step.
# description is checked as well although nothing currently sets its error.
REQUIRED_FIELDS: dict[WizardStep, tuple[str, ...]] = {
    WizardStep.DETAILS: ("name", "description", "from_address"),
    WizardStep.PARAMETERS: ("abi", "code"),
}


class WizardFields(BaseModel):
    """Form data collected by the wizard."""

    name: str = Field(default="")
    description: str = Field(default="")
    from_address: str | None = Field(default=None)
    input_type: InputType = Field(default=InputType.MANUAL)
    abi: str = Field(default="")
    code: str = Field(default="")
    parsed_abi: list[dict[str, Any]] | None = Field(default=None)
    params: list[Any] = Field(default_factory=list)


class DeploymentRequest(BaseModel):
    """Finalized parameter set handed to the deployment tracker."""

    code: str
    from_address: str
    parsed_abi: list[dict[str, Any]]
    params: list[Any] = Field(default_factory=list)
    name: str
    description: str = Field(default="")
    source: str = Field(default="")


@dataclass(frozen=True)
class Rejected:
    """The user declined to sign the deployment transaction."""


@dataclass(frozen=True)
class DeployError:
    """The deployment failed for any reason other than a user rejection."""

    detail: Exception


@dataclass(frozen=True)
class GateClosed:
    """A step transition that was refused."""

    reason: str
    invalid_fields: tuple[str, ...] = ()


def initial_field_errors() -> dict[str, str | None]:
    """Errors for a blank form: name, abi and code start out invalid."""
    return {
        "name": ERRORS["invalid_name"],
        "description": None,
        "from_address": None,
        "abi": ERRORS["invalid_abi"],
        "code": ERRORS["invalid_code"],
        "params": None,
    }


@dataclass
class WizardState:
    """Mutable state of one wizard session."""

    step: WizardStep = WizardStep.DETAILS
    fields: WizardFields = field(default_factory=WizardFields)
    field_errors: dict[str, str | None] = field(default_factory=initial_field_errors)
    outcome: Rejected | DeployError | None = None
    deployed_address: str | None = None
    transaction_hash: str | None = None
    progress_message: str = ""

    @property
    def is_terminal(self) -> bool:
        """True once the session has a final result to display."""
        return self.outcome is not None or self.step == WizardStep.COMPLETED


def invalid_fields(state: WizardState, step: WizardStep | None = None) -> tuple[str, ...]:
    """Return the required fields of a step that currently carry an error."""
    step = state.step if step is None else step
    required = REQUIRED_FIELDS.get(step, ())
    return tuple(name for name in required if state.field_errors.get(name) is not None)


def is_step_valid(state: WizardState, step: WizardStep | None = None) -> bool:
    """Check the validity gate of a step against the current field errors."""
    return not invalid_fields(state, step)


def next_step(step: WizardStep) -> WizardStep | None:
    """Return the step following ``step`` or None for the last one."""
    index = STEP_ORDER.index(step)
    if index + 1 >= len(STEP_ORDER):
        return None
    return STEP_ORDER[index + 1]


def advance(state: WizardState) -> WizardState | GateClosed:
    """Compute the state after leaving the current step.

    DETAILS and PARAMETERS move forward when their gate is open. DEPLOYMENT only ends
    through ``complete`` once an address is known.
    """
    if state.outcome is not None:
        return GateClosed("deployment has already ended")

    if state.step == WizardStep.DEPLOYMENT:
        return GateClosed("deployment is in progress")

    target = next_step(state.step)
    if target is None:
        return GateClosed("wizard is already completed")

    invalid = invalid_fields(state)
    if invalid:
        return GateClosed(f"invalid fields: {', '.join(invalid)}", invalid)

    return replace(state, step=target)


def complete(state: WizardState, address: str) -> WizardState | GateClosed:
    """Compute the state once the contract is deployed at ``address``."""
    if state.outcome is not None:
        return GateClosed("deployment has already ended")
    if state.step != WizardStep.DEPLOYMENT:
        return GateClosed(f"cannot complete from step '{state.step.value}'")
    return replace(state, step=WizardStep.COMPLETED, deployed_address=address)
