"""Wizard controller: collects and validates deployment input, drives the steps."""

import logging
from typing import Any, Callable

from chaindeploy.model.state import (
    DeployError,
    DeploymentRequest,
    GateClosed,
    InputType,
    Rejected,
    WizardState,
    WizardStep,
    advance,
    complete,
    is_step_valid,
)
from chaindeploy.model.validation import (
    ERRORS,
    is_address_valid,
    validate_abi,
    validate_code,
    validate_name,
)
from chaindeploy.wizard.tracker import DeploymentPhase, DeploymentTracker

logger = logging.getLogger(__name__)


class WizardController:
    """State machine behind the deployment wizard.

    Field updates validate and store input. ``advance`` moves through the steps when the
    current step's fields are valid, and from the parameters step hands the collected
    request to the deployment tracker. The tracker reports back through the
    ``deployment_*`` methods.
    """

    def __init__(
        self,
        accounts: dict[str, Any],
        tracker: DeploymentTracker,
        abi: str | None = None,
        code: str | None = None,
        source: str = "",
        on_change: Callable[[WizardState], None] | None = None,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        self.tracker = tracker
        self.source = source
        self.on_change = on_change
        self.on_close = on_close
        self.state = WizardState()
        self._deployment_started = False

        from_address = next(iter(accounts), None)
        self.state.fields.from_address = from_address
        if from_address is None:
            self.state.field_errors["from_address"] = ERRORS["invalid_owner"]

        if abi and code:
            self.update_abi(abi)
            self.update_code(code)

    @property
    def step(self) -> WizardStep:
        return self.state.step

    @property
    def can_advance(self) -> bool:
        """Whether the Next/Create action is enabled right now."""
        if self.state.is_terminal or self.state.step == WizardStep.DEPLOYMENT:
            return False
        return is_step_valid(self.state)

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self.state)

    def _set_error(self, field: str, error: str | None) -> None:
        self.state.field_errors[field] = error

    def update_name(self, value: str) -> str | None:
        result = validate_name(value)
        self.state.fields.name = result["name"]
        self._set_error("name", result["name_error"])
        self._changed()
        return result["name_error"]

    def update_description(self, value: str) -> None:
        # description is optional
        self.state.fields.description = value
        self._set_error("description", None)
        self._changed()

    def update_from_address(self, value: str) -> str | None:
        error = None if is_address_valid(value) else ERRORS["invalid_owner"]
        self.state.fields.from_address = value
        self._set_error("from_address", error)
        self._changed()
        return error

    def update_input_type(self, value: InputType) -> None:
        self.state.fields.input_type = InputType(value)
        self._changed()

    def update_abi(self, value: str) -> str | None:
        result = validate_abi(value)
        self.state.fields.abi = result["abi"]
        self.state.fields.parsed_abi = result["parsed_abi"]
        self._set_error("abi", result["abi_error"])
        self._changed()
        return result["abi_error"]

    def update_code(self, value: str) -> str | None:
        result = validate_code(value)
        self.state.fields.code = result["code"]
        self._set_error("code", result["code_error"])
        self._changed()
        return result["code_error"]

    def update_params(self, values: list[Any]) -> None:
        self.state.fields.params = list(values)
        self._changed()

    def advance(self) -> bool:
        """Move to the next step if the current one is valid.

        From the parameters step this starts the deployment.

        Returns:
            True if the step changed
        """
        if self.state.step == WizardStep.PARAMETERS:
            return self.begin_deployment()

        result = advance(self.state)
        if isinstance(result, GateClosed):
            logger.debug("Cannot leave step %s: %s", self.state.step.value, result.reason)
            return False

        self.state = result
        self._changed()
        return True

    def build_request(self) -> DeploymentRequest:
        """Assemble the deployment request from the collected fields."""
        fields = self.state.fields
        return DeploymentRequest(
            code=fields.code,
            from_address=fields.from_address or "",
            parsed_abi=fields.parsed_abi or [],
            params=fields.params,
            name=fields.name,
            description=fields.description,
            source=self.source,
        )

    def begin_deployment(self) -> bool:
        """Enter the deployment step and run the deployment.

        Returns:
            True if the deployment was started
        """
        if self._deployment_started:
            logger.debug("Deployment already started for this wizard")
            return False
        if self.state.step != WizardStep.PARAMETERS:
            logger.debug("Cannot deploy from step %s", self.state.step.value)
            return False

        result = advance(self.state)
        if isinstance(result, GateClosed):
            logger.debug("Cannot start deployment: %s", result.reason)
            return False

        request = self.build_request()
        self._deployment_started = True
        self.state = result
        self._changed()

        self.tracker.start(request, self)
        return True

    def close(self) -> None:
        """End the session."""
        if self.on_close is not None:
            self.on_close()

    # Tracker callbacks

    def deployment_progress(self, phase: DeploymentPhase, message: str, txhash: str | None) -> None:
        if self.state.outcome is not None:
            return
        self.state.progress_message = message
        if txhash and self.state.transaction_hash is None:
            self.state.transaction_hash = txhash
        self._changed()

    def deployment_succeeded(self, address: str) -> None:
        result = complete(self.state, address)
        if isinstance(result, GateClosed):
            logger.warning("Ignoring deployment success at %s: %s", address, result.reason)
            return
        self.state = result
        self._changed()

    def deployment_rejected(self) -> None:
        if self.state.outcome is not None:
            return
        self.state.outcome = Rejected()
        self._changed()

    def deployment_failed(self, error: Exception) -> None:
        if self.state.outcome is not None:
            return
        self.state.outcome = DeployError(error)
        self._changed()
