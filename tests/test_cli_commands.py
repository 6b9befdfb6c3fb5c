"""Tests for CLI commands and argument parsing."""

from chaindeploy.backends.metadata import LocalMetadataBackend
from chaindeploy.cli import app
from conftest import CONTRACT, OTHER


def _record_token(base_dir):
    store = LocalMetadataBackend(base_dir)
    store.set_account_name(CONTRACT, "Token")
    store.set_account_meta(
        CONTRACT,
        {
            "abi": [],
            "contract": True,
            "timestamp": 1700000000000,
            "deleted": False,
            "source": "contracts/Token.sol",
            "description": "An ERC20 token",
        },
    )


class TestBasicCLICommands:
    """Test basic CLI commands work correctly."""

    def test_help_command(self, cli_runner):
        """Test --help shows all commands."""
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "deploy" in result.output
        assert "accounts" in result.output
        assert "contracts" in result.output
        assert "config" in result.output
        assert "version" in result.output

    def test_version_command(self, cli_runner):
        """Test version command returns version info."""
        result = cli_runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "chaindeploy version" in result.output


class TestContractsCommands:
    """Test the contracts subcommands against the local store."""

    def test_list_no_contracts(self, cli_runner, tmp_path, monkeypatch):
        """Test list with nothing recorded."""
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["contracts", "list"])
        assert result.exit_code == 0
        assert "No contracts recorded" in result.output

    def test_list_shows_recorded(self, cli_runner, tmp_path, monkeypatch):
        """Test list shows a recorded contract name."""
        _record_token(tmp_path)
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["contracts", "list"])
        assert result.exit_code == 0
        assert "Token" in result.output

    def test_list_skips_unreadable_record(self, cli_runner, tmp_path, monkeypatch):
        """Test a corrupt record file does not break list."""
        _record_token(tmp_path)
        LocalMetadataBackend(tmp_path).record_path(OTHER).write_text("{not json")
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["contracts", "list"])
        assert result.exit_code == 0
        assert "Token" in result.output

    def test_show_unreadable_record(self, cli_runner, tmp_path, monkeypatch):
        """Test show of a corrupt record reports CONTRACT_INVALID."""
        store = LocalMetadataBackend(tmp_path)
        store.contracts_dir.mkdir(parents=True)
        store.record_path(OTHER).write_text("{not json")
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["contracts", "show", OTHER])
        assert result.exit_code == 1
        assert "CONTRACT_INVALID" in result.output

    def test_show_accepts_positional_argument(self, cli_runner, tmp_path, monkeypatch):
        """Test show takes the address as positional arg."""
        _record_token(tmp_path)
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["contracts", "show", CONTRACT])
        assert result.exit_code == 0
        assert "Token" in result.output
        assert "An ERC20 token" in result.output

    def test_show_missing_contract(self, cli_runner, tmp_path, monkeypatch):
        """Test show of an unknown address fails."""
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["contracts", "show", OTHER])
        assert result.exit_code == 1
        assert "CONTRACT_NOT_FOUND" in result.output

    def test_export_to_stdout(self, cli_runner, tmp_path, monkeypatch):
        """Test export prints YAML."""
        _record_token(tmp_path)
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["contracts", "export", CONTRACT])
        assert result.exit_code == 0
        assert "name: Token" in result.output
        assert "source: contracts/Token.sol" in result.output

    def test_export_to_file(self, cli_runner, tmp_path, monkeypatch):
        """Test export writes YAML to a file."""
        _record_token(tmp_path)
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["contracts", "export", CONTRACT, "-o", "token.yaml"])
        assert result.exit_code == 0
        assert "name: Token" in (tmp_path / "token.yaml").read_text()


class TestConfigCommands:
    """Test the config subcommands."""

    def test_show_defaults(self, cli_runner, tmp_path, monkeypatch):
        """Test show without a config file."""
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "http://127.0.0.1:8545" in result.output
        assert "Defaults (no config file)" in result.output

    def test_set_then_show(self, cli_runner, tmp_path, monkeypatch):
        """Test a value set is shown afterwards."""
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["config", "set", "rpc_url", "http://node:8545"])
        assert result.exit_code == 0
        assert "rpc_url set to" in result.output

        result = cli_runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "http://node:8545" in result.output

    def test_set_unknown_key(self, cli_runner, tmp_path, monkeypatch):
        """Test unknown keys are rejected."""
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["config", "set", "gas_price", "1"])
        assert result.exit_code == 1
        assert "CONFIG_KEY_UNKNOWN" in result.output


class TestAccountsCommand:
    """Test the accounts command with a stubbed backend."""

    def test_lists_accounts(self, cli_runner, tmp_path, monkeypatch, accounts):
        """Test accounts are printed in a table."""

        class StubBackend:
            def accounts(self):
                return accounts

        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("chaindeploy.backends.get_backend", lambda config: StubBackend())
        result = cli_runner.invoke(app, ["accounts"])
        assert result.exit_code == 0
        assert "Accounts" in result.output

    def test_no_accounts(self, cli_runner, tmp_path, monkeypatch):
        """Test a node without accounts."""

        class StubBackend:
            def accounts(self):
                return {}

        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("chaindeploy.backends.get_backend", lambda config: StubBackend())
        result = cli_runner.invoke(app, ["accounts"])
        assert result.exit_code == 0
        assert "no accounts" in result.output


class TestDeployArguments:
    """Test deploy argument handling before the wizard starts."""

    def test_missing_abi_file(self, cli_runner, tmp_path, monkeypatch):
        """Test a missing ABI file is reported."""
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["deploy", "--abi", "missing.abi"])
        assert result.exit_code == 1
        assert "FILE_NOT_FOUND" in result.output
