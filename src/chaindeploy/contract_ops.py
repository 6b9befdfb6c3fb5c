"""Operations on locally recorded contracts."""

from datetime import datetime, timezone
from pathlib import Path

from chaindeploy.backends.metadata import ContractRecord, LocalMetadataBackend
from chaindeploy.model.validation import ChainDeployError


def list_contracts(base_dir: Path | None = None) -> list[ContractRecord]:
    """
    List all contracts recorded in the local store.

    Args:
        base_dir: Base directory for .chaindeploy folder. Defaults to cwd.

    Returns:
        List of ContractRecord objects, newest first.
    """
    store = LocalMetadataBackend(base_dir)
    if not store.contracts_dir.exists():
        return []

    records = []
    for record_file in store.contracts_dir.glob("*.json"):
        try:
            records.append(store.load(record_file.stem))
        except ChainDeployError:
            # Skip unreadable records
            continue

    # deleted records are kept on disk but hidden
    records = [r for r in records if not r.meta.get("deleted", False)]
    return sorted(records, key=lambda r: r.meta.get("timestamp", 0), reverse=True)


def load_contract(address: str, base_dir: Path | None = None) -> ContractRecord:
    """
    Load a single recorded contract.

    Raises:
        ChainDeployError: If no record exists (CONTRACT_NOT_FOUND).
    """
    return LocalMetadataBackend(base_dir).load(address)


def get_contract_summary(record: ContractRecord) -> dict[str, str]:
    """
    Get summary information for display in list view.

    Args:
        record: ContractRecord instance.

    Returns:
        Dict with keys: address, name, deployed, description.
    """
    timestamp = record.meta.get("timestamp")
    deployed = "-"
    if timestamp:
        deployed = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")

    return {
        "address": record.address,
        "name": record.name or "(unnamed)",
        "deployed": deployed,
        "description": record.meta.get("description") or "",
    }
