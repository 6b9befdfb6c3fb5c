"""Constructor parameter entry: read inputs from the ABI and coerce typed values."""

import json
import re
from typing import Any

from web3 import Web3

from chaindeploy.model.validation import ChainDeployError

_INT_RE = re.compile(r"^u?int(\d*)$")
_BYTES_RE = re.compile(r"^bytes(\d+)$")


def constructor_inputs(parsed_abi: list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    """Return the constructor inputs declared by an ABI (empty when it has none)."""
    for entry in parsed_abi or []:
        if entry.get("type") == "constructor":
            return list(entry.get("inputs", []))
    return []


def _coerce_array(abi_type: str, value: Any) -> list[Any]:
    base, _, size = abi_type[:-1].rpartition("[")
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError as e:
            raise ValueError(f"{abi_type} expects a JSON array") from e
    if not isinstance(value, list):
        raise ValueError(f"{abi_type} expects a JSON array")
    if size and len(value) != int(size):
        raise ValueError(f"{abi_type} expects exactly {size} values")
    return [coerce_value(base, item) for item in value]


def _coerce_int(abi_type: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{abi_type} expects an integer")
    if isinstance(value, str):
        try:
            value = int(value.strip(), 0)
        except ValueError as e:
            raise ValueError(f"{abi_type} expects an integer") from e
    if not isinstance(value, int):
        raise ValueError(f"{abi_type} expects an integer")

    bits = int(_INT_RE.match(abi_type).group(1) or 256)
    if abi_type.startswith("uint"):
        if not 0 <= value < 2**bits:
            raise ValueError(f"{abi_type} out of range")
    elif not -(2 ** (bits - 1)) <= value < 2 ** (bits - 1):
        raise ValueError(f"{abi_type} out of range")
    return value


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "1", "yes", "y"):
        return True
    if text in ("false", "0", "no", "n"):
        return False
    raise ValueError("bool expects true or false")


def _coerce_bytes(abi_type: str, value: Any) -> bytes:
    text = str(value).strip().removeprefix("0x")
    try:
        data = bytes.fromhex(text)
    except ValueError as e:
        raise ValueError(f"{abi_type} expects a hex string") from e

    match = _BYTES_RE.match(abi_type)
    if match and len(data) != int(match.group(1)):
        raise ValueError(f"{abi_type} expects exactly {match.group(1)} bytes")
    return data


def coerce_value(abi_type: str, value: Any) -> Any:
    """Convert user input to the Python value web3 expects for ``abi_type``.

    Raises:
        ValueError: If the input does not fit the type.
    """
    if abi_type.endswith("]"):
        return _coerce_array(abi_type, value)
    if _INT_RE.match(abi_type):
        return _coerce_int(abi_type, value)
    if abi_type == "bool":
        return _coerce_bool(value)
    if abi_type == "address":
        if not isinstance(value, str) or not Web3.is_address(value.strip()):
            raise ValueError("address expects a 20 byte hex address")
        return Web3.to_checksum_address(value.strip())
    if abi_type == "bytes" or _BYTES_RE.match(abi_type):
        return _coerce_bytes(abi_type, value)
    if abi_type == "string":
        return str(value)
    raise ValueError(f"unsupported parameter type {abi_type}")


def is_supported_type(abi_type: str) -> bool:
    """Check whether ``coerce_value`` can convert input for ``abi_type``."""
    if abi_type.endswith("]"):
        base, _, size = abi_type[:-1].rpartition("[")
        return (not size or size.isdigit()) and is_supported_type(base)
    if _INT_RE.match(abi_type) or _BYTES_RE.match(abi_type):
        return True
    return abi_type in ("bool", "address", "bytes", "string")


def check_supported(inputs: list[dict[str, Any]]) -> None:
    """Fail before prompting when a constructor input cannot be entered as text.

    Raises:
        ChainDeployError: For tuple and other unsupported types (PARAM_UNSUPPORTED).
    """
    unsupported = [i["type"] for i in inputs if not is_supported_type(i["type"])]
    if unsupported:
        raise ChainDeployError(
            "PARAM_UNSUPPORTED",
            f"Constructor parameter types not supported: {', '.join(unsupported)}",
        )
