"""Rich prompts for the interactive wizard."""

from pathlib import Path
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from chaindeploy.model.state import STEP_TITLES, InputType, WizardFields, WizardStep

console = Console()


def _read_text_or_file(value: str) -> str:
    """Return the file contents when ``value`` names a file, else ``value`` itself."""
    path = Path(value).expanduser()
    try:
        if path.is_file():
            return path.read_text().strip()
    except OSError:
        pass
    return value


def show_step(step: WizardStep) -> None:
    """Print the step header."""
    titles = [STEP_TITLES[s] for s in WizardStep]
    current = list(WizardStep).index(step)
    trail = " > ".join(f"[bold]{t}[/bold]" if i == current else f"[dim]{t}[/dim]" for i, t in enumerate(titles))
    console.print(f"\n{trail}\n")


def show_field_error(error: str) -> None:
    console.print(f"  [red]{error}[/red]")


def prompt_name(default: str = "") -> str:
    """Prompt for the contract name."""
    return Prompt.ask("[cyan]Contract name[/cyan]", default=default or None) or ""


def prompt_description(default: str = "") -> str:
    """Prompt for an optional description."""
    return Prompt.ask("[cyan]Description[/cyan] [dim](optional)[/dim]", default=default)


def prompt_from_address(accounts: dict[str, Any], default: str | None = None) -> str:
    """Prompt for the owner account.

    Accounts are listed by number; a full address can be typed instead.
    """
    addresses = list(accounts)
    if not addresses:
        console.print("[yellow]The node reports no accounts.[/yellow]")
        return Prompt.ask("[cyan]Owner address[/cyan]")

    console.print("[bold]Owner account:[/bold]")
    for i, address in enumerate(addresses, start=1):
        console.print(f"  [dim]{i}.[/dim] {address}")

    default_choice = str(addresses.index(default) + 1) if default in addresses else "1"
    choice = Prompt.ask("\n[cyan]Select account (number or address)[/cyan]", default=default_choice)
    if choice.isdigit() and 1 <= int(choice) <= len(addresses):
        return addresses[int(choice) - 1]
    return choice


def prompt_input_type() -> InputType:
    """Ask how the ABI and bytecode will be supplied."""
    console.print("\n[bold]Contract input:[/bold]")
    console.print("  [dim]1.[/dim] manual - Manual input of the ABI and the bytecode")
    console.print("  [dim]2.[/dim] solc   - Parse the ABI and the bytecode from solc output")

    choice = Prompt.ask(
        "\n[cyan]Select input type[/cyan]",
        choices=["1", "2"],
        default="1",
    )

    return {"1": InputType.MANUAL, "2": InputType.SOLC}[choice]


def prompt_abi() -> str:
    """Prompt for the ABI as JSON or a path to a JSON file."""
    return _read_text_or_file(Prompt.ask("[cyan]ABI[/cyan] [dim](JSON or file path)[/dim]"))


def prompt_code() -> str:
    """Prompt for the bytecode as hex or a path to a file holding it."""
    return _read_text_or_file(Prompt.ask("[cyan]Bytecode[/cyan] [dim](hex or file path)[/dim]"))


def prompt_solc_file() -> Path:
    """Prompt for the solc --combined-json output file."""
    value = Prompt.ask("[cyan]solc output file[/cyan] [dim](solc --combined-json abi,bin)[/dim]")
    return Path(value).expanduser()


def prompt_contract_choice(names: list[str]) -> str:
    """Ask which compiled contract to deploy."""
    console.print("\n[bold]Contracts in solc output:[/bold]")
    for i, name in enumerate(names, start=1):
        console.print(f"  [dim]{i}.[/dim] {name}")

    choice = Prompt.ask(
        "\n[cyan]Select contract[/cyan]",
        choices=[str(i) for i in range(1, len(names) + 1)],
        default="1",
    )
    return names[int(choice) - 1]


def prompt_constructor_param(abi_input: dict[str, Any], index: int) -> str:
    """Prompt for one constructor argument."""
    label = abi_input.get("name") or f"arg{index}"
    return Prompt.ask(f"  [cyan]{label}[/cyan] [dim]({abi_input['type']})[/dim]")


def confirm_create() -> bool:
    return Confirm.ask("\n[cyan]Create the contract?[/cyan]", default=True)


def show_summary(fields: WizardFields, inputs: list[dict[str, Any]]) -> None:
    """Display the deployment summary."""
    table = Table(title="Deployment Summary")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Name", fields.name)
    table.add_row("Description", fields.description or "(none)")
    table.add_row("Owner", fields.from_address or "(none)")
    table.add_row("Input", fields.input_type.value)
    table.add_row("ABI entries", str(len(fields.parsed_abi or [])))
    table.add_row("Bytecode", f"{len(fields.code.removeprefix('0x')) // 2} bytes")

    for i, (abi_input, value) in enumerate(zip(inputs, fields.params)):
        label = abi_input.get("name") or f"arg{i}"
        table.add_row(f"  {label}", str(value))

    console.print()
    console.print(table)


def show_completed(address: str, txhash: str | None) -> None:
    lines = f"Your contract has been deployed at\n[bold]{address}[/bold]"
    if txhash:
        lines += f"\n[dim]Transaction: {txhash}[/dim]"
    console.print(Panel(lines, title="completed", border_style="green"))


def show_rejected() -> None:
    console.print(
        Panel(
            "You can safely exit, the contract deployment will not occur.",
            title="The deployment has been rejected",
            border_style="yellow",
        )
    )


def show_deploy_error(error: Exception) -> None:
    console.print(Panel(str(error) or type(error).__name__, title="deployment failed", border_style="red"))
