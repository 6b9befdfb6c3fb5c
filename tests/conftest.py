"""Pytest configuration and shared fixtures."""

import json

import pytest
from typer.testing import CliRunner

from chaindeploy.backends.base import ProgressEvent
from chaindeploy.wizard.controller import WizardController
from chaindeploy.wizard.tracker import DeploymentTracker

OWNER = "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266"
OTHER = "0x70997970c51812dc3a010c7d01b50e0d17dc79c8"
CONTRACT = "0x5fbdb2315678afecb367f032d93f642f64180aa3"


class FakeDeployBackend:
    """Deploy backend replaying a scripted list of progress events."""

    def __init__(self, events=(), address=CONTRACT, error=None, progress_errors=()):
        self.events = list(events)
        self.address = address
        self.error = error
        self.progress_errors = list(progress_errors)
        self.calls = []

    def accounts(self):
        return {OWNER: {"address": OWNER}}

    def deploy(self, abi, options, params, on_progress):
        self.calls.append({"abi": abi, "options": options, "params": params})
        for progress_error in self.progress_errors:
            on_progress(progress_error, None)
        for event in self.events:
            if isinstance(event, tuple):
                event = ProgressEvent(state=event[0], txhash=event[1])
            elif isinstance(event, str):
                event = ProgressEvent(state=event)
            on_progress(None, event)
        if self.error is not None:
            raise self.error
        return self.address


class FakeMetadataBackend:
    """Metadata backend keeping everything in memory."""

    def __init__(self, fail=False):
        self.fail = fail
        self.names = {}
        self.metas = {}

    def set_account_name(self, address, name):
        if self.fail:
            raise RuntimeError("node unavailable")
        self.names[address] = name

    def set_account_meta(self, address, meta):
        if self.fail:
            raise RuntimeError("node unavailable")
        self.metas[address] = meta


class RecordingReporter:
    """Error reporter remembering every reported error."""

    def __init__(self):
        self.errors = []

    def report(self, error):
        self.errors.append(error)


@pytest.fixture
def cli_runner():
    """CLI runner for typer testing."""
    return CliRunner()


@pytest.fixture
def accounts():
    """Two node accounts keyed by address."""
    return {OWNER: {"address": OWNER}, OTHER: {"address": OTHER}}


@pytest.fixture
def token_abi():
    """Parsed ABI with a one-argument constructor."""
    return [
        {
            "type": "constructor",
            "inputs": [{"name": "supply", "type": "uint256"}],
            "stateMutability": "nonpayable",
        },
        {
            "type": "function",
            "name": "totalSupply",
            "inputs": [],
            "outputs": [{"name": "", "type": "uint256"}],
            "stateMutability": "view",
        },
        {
            "type": "event",
            "name": "Transfer",
            "inputs": [
                {"name": "from", "type": "address", "indexed": True},
                {"name": "to", "type": "address", "indexed": True},
                {"name": "value", "type": "uint256", "indexed": False},
            ],
            "anonymous": False,
        },
    ]


@pytest.fixture
def token_abi_text(token_abi):
    """ABI as the user would paste it."""
    return json.dumps(token_abi, indent=2)


@pytest.fixture
def token_code():
    """Contract bytecode."""
    return "0x6080604052348015600f57600080fd5b50603f80601d6000396000f3fe"


@pytest.fixture
def metadata():
    return FakeMetadataBackend()


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def make_wizard(accounts, metadata, reporter):
    """Factory fixture building a controller around a scripted backend."""

    def _make(backend=None, wizard_accounts=None, **kwargs):
        backend = backend or FakeDeployBackend()
        tracker = DeploymentTracker(backend, metadata, reporter, clock=lambda: 1700000000.5)
        return WizardController(accounts if wizard_accounts is None else wizard_accounts, tracker, **kwargs)

    return _make


@pytest.fixture
def ready_wizard(make_wizard, token_abi_text, token_code):
    """Factory fixture returning a controller waiting on the parameters step."""

    def _make(backend=None, **kwargs):
        wizard = make_wizard(backend, **kwargs)
        wizard.update_name("Token")
        wizard.update_description("An ERC20 token")
        assert wizard.advance()
        wizard.update_abi(token_abi_text)
        wizard.update_code(token_code)
        wizard.update_params([1000])
        return wizard

    return _make
