"""CLI entry point for the contract deployment tool."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from chaindeploy.model.validation import ChainDeployError

app = typer.Typer(
    name="chaindeploy",
    help="Contract deployment tool - deploy smart contracts through a JSON-RPC node",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only log errors"),
    ] = False,
) -> None:
    """Contract deployment tool."""
    from chaindeploy.utils.log import configure_logging

    configure_logging(verbose=verbose, quiet=quiet)


# Subcommand groups
contracts_app = typer.Typer(name="contracts", help="Inspect recorded contracts")
config_app = typer.Typer(name="config", help="Manage node configuration")

app.add_typer(contracts_app)
app.add_typer(config_app)

console = Console()


def _handle_error(error: ChainDeployError) -> None:
    """Handle tool errors with rich formatting."""
    console.print(f"[red]Error ({error.code}):[/red] {error.message}")
    raise typer.Exit(1)


def _load_config(rpc_url: str | None):
    from chaindeploy.model.config import load_config

    config = load_config()
    if rpc_url:
        config = config.model_copy(update={"rpc_url": rpc_url})
    return config


def _read_file(path: str | None, label: str) -> str | None:
    if path is None:
        return None
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise ChainDeployError("FILE_NOT_FOUND", f"{label} file not found: {file_path}")
    return file_path.read_text().strip()


def _complete_contract(incomplete: str) -> list[str]:
    """Shell completion for recorded contract addresses."""
    from chaindeploy.contract_ops import list_contracts

    return [r.address for r in list_contracts() if r.address.lower().startswith(incomplete.lower())]


RpcUrlOption = Annotated[
    Optional[str],
    typer.Option("--rpc-url", help="Node URL (overrides the configured one)", envvar="CHAINDEPLOY_RPC_URL"),
]


@app.command()
def deploy(
    abi: Annotated[
        Optional[str],
        typer.Option("--abi", help="File holding the contract ABI (JSON)"),
    ] = None,
    code: Annotated[
        Optional[str],
        typer.Option("--code", help="File holding the contract bytecode (hex)"),
    ] = None,
    source: Annotated[
        str,
        typer.Option("--source", help="Source label recorded with the contract"),
    ] = "",
    rpc_url: RpcUrlOption = None,
) -> None:
    """Interactive wizard to deploy a contract.

    [bold]Example:[/bold]
        chaindeploy deploy
        chaindeploy deploy --abi Token.abi --code Token.bin
    """
    from chaindeploy.model.state import DeployError

    try:
        from chaindeploy.wizard.flow import run_wizard

        config = _load_config(rpc_url)
        state = run_wizard(
            config,
            abi=_read_file(abi, "ABI"),
            code=_read_file(code, "Bytecode"),
            source=source,
        )
    except ChainDeployError as e:
        _handle_error(e)
    except KeyboardInterrupt:
        console.print("\n[yellow]Wizard cancelled.[/yellow]")
        raise typer.Exit(0)

    if isinstance(state.outcome, DeployError):
        raise typer.Exit(1)


@app.command()
def accounts(rpc_url: RpcUrlOption = None) -> None:
    """List accounts the node can sign with."""
    from chaindeploy.backends import get_backend

    try:
        config = _load_config(rpc_url)
        addresses = list(get_backend(config).accounts())
    except ChainDeployError as e:
        _handle_error(e)

    if not addresses:
        console.print("[yellow]The node reports no accounts.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Accounts ({config.rpc_url})")
    table.add_column("#", style="dim")
    table.add_column("Address", style="cyan")
    for i, address in enumerate(addresses, start=1):
        table.add_row(str(i), address)
    console.print(table)


@contracts_app.command("list")
def contracts_list() -> None:
    """List contracts recorded after deployment."""
    from chaindeploy.contract_ops import get_contract_summary, list_contracts

    records = list_contracts()

    if not records:
        console.print("[yellow]No contracts recorded.[/yellow]")
        console.print("[dim]Use 'chaindeploy deploy' to deploy one.[/dim]")
        raise typer.Exit(0)

    table = Table(title="Contracts")
    table.add_column("Address", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Deployed", style="white")
    table.add_column("Description", style="dim")

    for record in records:
        summary = get_contract_summary(record)
        table.add_row(
            summary["address"],
            summary["name"],
            summary["deployed"],
            summary["description"],
        )

    console.print(table)


@contracts_app.command("show")
def contracts_show(
    address: Annotated[
        str,
        typer.Argument(help="Contract address", metavar="ADDRESS", autocompletion=_complete_contract),
    ],
) -> None:
    """Show a recorded contract.

    [bold]Example:[/bold]
        chaindeploy contracts show 0x5FbDB2315678afecb367f032d93F642f64180aa3
    """
    from chaindeploy.contract_ops import get_contract_summary, load_contract

    try:
        record = load_contract(address)
    except ChainDeployError as e:
        _handle_error(e)

    summary = get_contract_summary(record)
    table = Table(title=f"Contract: {record.address}")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Name", summary["name"])
    table.add_row("Description", summary["description"] or "(none)")
    table.add_row("Deployed", summary["deployed"])
    table.add_row("Source", record.meta.get("source") or "(none)")
    table.add_row("ABI entries", str(len(record.meta.get("abi") or [])))

    console.print(table)


@contracts_app.command("export")
def contracts_export(
    address: Annotated[
        str,
        typer.Argument(help="Contract address", metavar="ADDRESS", autocompletion=_complete_contract),
    ],
    output: Annotated[
        Optional[str],
        typer.Option("-o", "--output", help="Write to file instead of stdout"),
    ] = None,
) -> None:
    """Export a recorded contract as YAML.

    [bold]Example:[/bold]
        chaindeploy contracts export 0x5FbDB2315678afecb367f032d93F642f64180aa3 -o token.yaml
    """
    from chaindeploy.contract_ops import load_contract

    try:
        record = load_contract(address)
    except ChainDeployError as e:
        _handle_error(e)

    data = record.model_dump()
    if output:
        output_path = Path(output)
        with output_path.open("w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        console.print(f"[green]Contract written to {output_path}[/green]")
    else:
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))


@config_app.command("show")
def config_show() -> None:
    """Show the node configuration."""
    from chaindeploy.model.config import config_path, load_config

    try:
        config = load_config()
    except ChainDeployError as e:
        _handle_error(e)

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for key, value in config.model_dump(mode="json").items():
        table.add_row(key, str(value))

    console.print(table)
    path = config_path()
    console.print(f"[dim]{path if path.exists() else 'Defaults (no config file)'}[/dim]")


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Setting name", metavar="KEY")],
    value: Annotated[str, typer.Argument(help="New value", metavar="VALUE")],
) -> None:
    """Change one configuration setting.

    [bold]Example:[/bold]
        chaindeploy config set rpc_url http://127.0.0.1:8545
        chaindeploy config set metadata_store node
    """
    from chaindeploy.model.config import update_config

    try:
        config = update_config(key, value)
    except ChainDeployError as e:
        _handle_error(e)

    console.print(f"[green]{key} set to {json.dumps(config.model_dump(mode='json')[key])}[/green]")


@app.command()
def version() -> None:
    """Show version information."""
    from chaindeploy import __version__

    console.print(f"chaindeploy version {__version__}")


if __name__ == "__main__":
    app()
