"""Interactive smart contract deployment tool."""

__version__ = "0.1.0"
