"""Wizard flow logic."""

import logging
from pathlib import Path

from rich.console import Console

from chaindeploy.backends import get_backend, get_metadata_backend
from chaindeploy.model.config import ChainConfig
from chaindeploy.model.state import DeployError, InputType, Rejected, WizardState, WizardStep
from chaindeploy.model.validation import ChainDeployError
from chaindeploy.utils.log import ConsoleErrorReporter
from chaindeploy.utils.solc import load_combined_json, select_contract
from chaindeploy.wizard.controller import WizardController
from chaindeploy.wizard.params import check_supported, coerce_value, constructor_inputs
from chaindeploy.wizard.prompts import (
    confirm_create,
    prompt_abi,
    prompt_code,
    prompt_constructor_param,
    prompt_contract_choice,
    prompt_description,
    prompt_from_address,
    prompt_input_type,
    prompt_name,
    prompt_solc_file,
    show_completed,
    show_deploy_error,
    show_field_error,
    show_rejected,
    show_step,
    show_summary,
)
from chaindeploy.wizard.tracker import DeploymentTracker

logger = logging.getLogger(__name__)

console = Console()


def _details_step(controller: WizardController, accounts: dict) -> None:
    show_step(WizardStep.DETAILS)

    while error := controller.update_name(prompt_name()):
        show_field_error(error)

    controller.update_description(prompt_description())
    controller.update_input_type(prompt_input_type())

    while error := controller.update_from_address(
        prompt_from_address(accounts, controller.state.fields.from_address)
    ):
        show_field_error(error)


def _solc_input(controller: WizardController) -> None:
    while True:
        try:
            contracts = load_combined_json(prompt_solc_file())
            names = sorted(contracts)
            name = names[0] if len(names) == 1 else prompt_contract_choice(names)
            contract = select_contract(contracts, name)
        except ChainDeployError as e:
            show_field_error(e.message)
            continue

        abi_error = controller.update_abi(contract.abi)
        code_error = controller.update_code(contract.bytecode)
        if abi_error is None and code_error is None:
            console.print(f"[green]Loaded contract {contract.name}[/green]")
            return
        for error in (abi_error, code_error):
            if error:
                show_field_error(error)


def _manual_input(controller: WizardController) -> None:
    while error := controller.update_abi(prompt_abi()):
        show_field_error(error)

    while error := controller.update_code(prompt_code()):
        show_field_error(error)


def _constructor_params(controller: WizardController) -> list[dict]:
    inputs = constructor_inputs(controller.state.fields.parsed_abi)
    if not inputs:
        controller.update_params([])
        return inputs

    check_supported(inputs)
    console.print("\n[bold]Constructor parameters:[/bold]")
    values = []
    for index, abi_input in enumerate(inputs):
        while True:
            try:
                values.append(coerce_value(abi_input["type"], prompt_constructor_param(abi_input, index)))
                break
            except ValueError as e:
                show_field_error(str(e))

    controller.update_params(values)
    return inputs


def _parameters_step(controller: WizardController) -> list[dict]:
    show_step(WizardStep.PARAMETERS)

    if controller.can_advance:
        console.print("[dim]Using the supplied ABI and bytecode.[/dim]")
    elif controller.state.fields.input_type == InputType.SOLC:
        _solc_input(controller)
    else:
        _manual_input(controller)

    return _constructor_params(controller)


def _deploy(controller: WizardController) -> None:
    show_step(WizardStep.DEPLOYMENT)
    console.print("[bold]The deployment is currently in progress[/bold]")

    with console.status("Starting deployment...") as status:

        def on_change(state: WizardState) -> None:
            message = state.progress_message or "Starting deployment..."
            if state.transaction_hash:
                message += f"\n[dim]Transaction: {state.transaction_hash}[/dim]"
            status.update(message)

        controller.on_change = on_change
        controller.advance()

    controller.on_change = None


def _show_result(state: WizardState) -> None:
    if isinstance(state.outcome, Rejected):
        show_rejected()
    elif isinstance(state.outcome, DeployError):
        show_deploy_error(state.outcome.detail)
    elif state.step == WizardStep.COMPLETED:
        show_completed(state.deployed_address, state.transaction_hash)


def run_wizard(
    config: ChainConfig,
    abi: str | None = None,
    code: str | None = None,
    source: str = "",
    base_dir: Path | None = None,
) -> WizardState:
    """Run the interactive deployment wizard.

    Returns:
        The final wizard state
    """
    console.print("\n[bold blue]Contract Deployment Wizard[/bold blue]")
    console.print(f"[dim]Node: {config.rpc_url}[/dim]")

    backend = get_backend(config)
    accounts = backend.accounts()
    tracker = DeploymentTracker(
        backend,
        get_metadata_backend(config, backend, base_dir),
        ConsoleErrorReporter(),
    )
    controller = WizardController(accounts, tracker, abi=abi, code=code, source=source)

    _details_step(controller, accounts)
    controller.advance()

    inputs = _parameters_step(controller)
    show_summary(controller.state.fields, inputs)

    if not confirm_create():
        console.print("[yellow]Wizard cancelled.[/yellow]")
        controller.close()
        return controller.state

    _deploy(controller)
    _show_result(controller.state)
    controller.close()
    return controller.state
