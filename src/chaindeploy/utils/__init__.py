"""Utility functions for contract deployment."""

from chaindeploy.utils.log import ConsoleErrorReporter, configure_logging
from chaindeploy.utils.solc import load_combined_json, parse_combined_json, select_contract

__all__ = [
    "ConsoleErrorReporter",
    "configure_logging",
    "load_combined_json",
    "parse_combined_json",
    "select_contract",
]
