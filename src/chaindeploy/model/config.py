"""Chain connection configuration model."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from chaindeploy.model.validation import ChainDeployError

CONFIG_DIR = ".chaindeploy"
CONFIG_FILE = "config.json"


class MetadataStore(str, Enum):
    """Where contract names and metadata are recorded after deployment."""

    LOCAL = "local"  # JSON files under .chaindeploy/contracts
    NODE = "node"  # parity_setAccountName / parity_setAccountMeta


class ChainConfig(BaseModel):
    """Configuration for talking to a JSON-RPC node."""

    rpc_url: str = Field(default="http://127.0.0.1:8545")
    request_timeout: float = Field(default=30.0, gt=0)
    # Delay between receipt polls
    poll_interval: float = Field(default=1.0, gt=0)
    metadata_store: MetadataStore = Field(default=MetadataStore.LOCAL)


def config_path(base_dir: Path | None = None) -> Path:
    """Return the path of the config file."""
    if base_dir is None:
        base_dir = Path.cwd()
    return base_dir / CONFIG_DIR / CONFIG_FILE


def load_config(base_dir: Path | None = None) -> ChainConfig:
    """Load configuration from disk, falling back to defaults."""
    path = config_path(base_dir)
    if not path.exists():
        return ChainConfig()
    try:
        with path.open() as f:
            data = json.load(f)
        return ChainConfig(**data)
    except (ValueError, PydanticValidationError) as e:
        raise ChainDeployError("CONFIG_INVALID", f"Cannot read {path}: {e}") from e


def save_config(config: ChainConfig, base_dir: Path | None = None) -> Path:
    """Save configuration to disk."""
    path = config_path(base_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        json.dump(config.model_dump(mode="json"), f, indent=2)
    return path


def update_config(key: str, value: str, base_dir: Path | None = None) -> ChainConfig:
    """Set a single configuration key and persist the result.

    Raises:
        ChainDeployError: If the key is unknown (CONFIG_KEY_UNKNOWN)
                          or the value does not validate (CONFIG_INVALID).
    """
    if key not in ChainConfig.model_fields:
        known = ", ".join(ChainConfig.model_fields)
        raise ChainDeployError("CONFIG_KEY_UNKNOWN", f"Unknown key '{key}' (expected one of: {known})")

    current = load_config(base_dir)
    data = current.model_dump(mode="json")
    data[key] = value
    try:
        config = ChainConfig(**data)
    except PydanticValidationError as e:
        raise ChainDeployError("CONFIG_INVALID", f"Invalid value for '{key}': {value}") from e

    save_config(config, base_dir)
    return config
