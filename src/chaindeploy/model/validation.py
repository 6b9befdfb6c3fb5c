"""Validation utilities for contract deployment input."""

import json
import re
from typing import Any

from web3 import Web3


class ChainDeployError(Exception):
    """Deployment tool error with error code."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


ERRORS = {
    "invalid_abi": "ABI should be a valid JSON array",
    "invalid_code": "code should be the compiled hex string",
    "invalid_name": "name should not be blank and longer than 2",
    "invalid_owner": "needs a valid account as contract owner",
}

_HEX_RE = re.compile(r"^(0x)?[0-9a-fA-F]*$")


def is_address_valid(address: str | None) -> bool:
    """Check that an address is a well-formed 20-byte hex address."""
    if not address:
        return False
    return Web3.is_address(address)


def validate_name(name: str) -> dict[str, Any]:
    """Validate a human-readable contract name."""
    name = (name or "").strip()
    name_error = None if len(name) >= 2 else ERRORS["invalid_name"]
    return {"name": name, "name_error": name_error}


def _is_abi_function(entry: dict) -> bool:
    return entry.get("type") in ("function", "constructor") and isinstance(entry.get("inputs"), list)


def _is_abi_event(entry: dict) -> bool:
    return entry.get("type") == "event" and isinstance(entry.get("inputs"), list)


def _is_abi_fallback(entry: dict) -> bool:
    return entry.get("type") in ("fallback", "receive")


def validate_abi(abi: str) -> dict[str, Any]:
    """Validate an ABI given as JSON text.

    Args:
        abi: Raw ABI text as typed or loaded by the user

    Returns:
        Dict with keys ``abi`` (normalised text when valid, raw text otherwise),
        ``abi_error`` and ``parsed_abi`` (``None`` when invalid)
    """
    try:
        parsed = json.loads(abi)
    except (TypeError, ValueError):
        return {"abi": abi, "abi_error": ERRORS["invalid_abi"], "parsed_abi": None}

    if not isinstance(parsed, list):
        return {"abi": abi, "abi_error": ERRORS["invalid_abi"], "parsed_abi": None}

    for index, entry in enumerate(parsed):
        if not isinstance(entry, dict):
            return {
                "abi": abi,
                "abi_error": f"{ERRORS['invalid_abi']} (#{index})",
                "parsed_abi": None,
            }
        if not (_is_abi_function(entry) or _is_abi_event(entry) or _is_abi_fallback(entry)):
            label = entry.get("name") or entry.get("type")
            return {
                "abi": abi,
                "abi_error": f"{ERRORS['invalid_abi']} (#{index}: {label})",
                "parsed_abi": None,
            }

    return {
        "abi": json.dumps(parsed, separators=(",", ":")),
        "abi_error": None,
        "parsed_abi": parsed,
    }


def validate_code(code: str) -> dict[str, Any]:
    """Validate compiled contract bytecode."""
    code = (code or "").strip()
    if not _HEX_RE.match(code):
        return {"code": code, "code_error": ERRORS["invalid_code"]}
    if not code.removeprefix("0x"):
        return {"code": code, "code_error": "code should not be blank"}
    return {"code": code, "code_error": None}
