"""Reading ABI and bytecode from solc compiler output."""

import json
from pathlib import Path

from pydantic import BaseModel

from chaindeploy.model.validation import ChainDeployError


class SolcContract(BaseModel):
    """ABI and bytecode of one compiled contract."""

    name: str
    abi: str
    bytecode: str


def parse_combined_json(text: str) -> dict[str, SolcContract]:
    """Parse ``solc --combined-json abi,bin`` output.

    Args:
        text: Raw compiler output

    Returns:
        Contracts keyed by their short name (without the source path)

    Raises:
        ChainDeployError: If the output is not combined JSON (SOLC_INVALID)
    """
    try:
        data = json.loads(text)
    except ValueError as e:
        raise ChainDeployError("SOLC_INVALID", f"solc output is not valid JSON: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("contracts"), dict):
        raise ChainDeployError("SOLC_INVALID", "solc output has no 'contracts' section")

    contracts: dict[str, SolcContract] = {}
    for qualified_name, output in data["contracts"].items():
        name = qualified_name.rsplit(":", 1)[-1]
        abi = output.get("abi")
        bytecode = output.get("bin")
        if abi is None or bytecode is None:
            raise ChainDeployError(
                "SOLC_INVALID",
                f"Contract '{qualified_name}' lacks abi or bin (compile with --combined-json abi,bin)",
            )
        # older solc releases emit the ABI as an embedded JSON string
        if not isinstance(abi, str):
            abi = json.dumps(abi)
        contracts[name] = SolcContract(name=name, abi=abi, bytecode=bytecode)

    return contracts


def load_combined_json(path: Path) -> dict[str, SolcContract]:
    """Load and parse a combined JSON file."""
    try:
        text = path.read_text()
    except FileNotFoundError as e:
        raise ChainDeployError("SOLC_INVALID", f"File not found: {path}") from e
    return parse_combined_json(text)


def select_contract(contracts: dict[str, SolcContract], name: str | None = None) -> SolcContract:
    """Pick a contract by name, or the only one when no name is given."""
    if not contracts:
        raise ChainDeployError("SOLC_INVALID", "solc output contains no contracts")
    if name is None:
        if len(contracts) > 1:
            names = ", ".join(sorted(contracts))
            raise ChainDeployError("SOLC_AMBIGUOUS", f"Several contracts found, choose one of: {names}")
        return next(iter(contracts.values()))
    if name not in contracts:
        raise ChainDeployError("SOLC_INVALID", f"Contract '{name}' not found in solc output")
    return contracts[name]
