"""
Tests for the `evm-config` click CLI.
"""

import json
import logging
import os
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from ethereum_evm_config import DEFAULT_MEMORY_LIMIT

from ..evm_config import evm_config


@pytest.fixture
def runner(monkeypatch, tmp_path: Path):
    """Provides a Click CliRunner that runs outside of any project and environment."""
    for name in list(os.environ):
        if name.startswith("EVM_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield CliRunner()
    root_logger.handlers = handlers
    root_logger.setLevel(level)


def test_show_defaults(runner):
    """
    Test the options printed without configuration file or flags.
    """
    result = runner.invoke(evm_config, ["show"])
    assert result.exit_code == 0, result.output
    values = yaml.safe_load(result.output)
    assert values["fork_url"] is None
    assert values["chain_id"] == "anvil-hardhat"
    assert values["memory_limit"] == DEFAULT_MEMORY_LIMIT
    assert values["verbosity"] == 0
    assert values["ffi"] is False


def test_show_with_flags(runner):
    """
    Test that command-line flags override the defaults.
    """
    result = runner.invoke(
        evm_config,
        ["show", "--format", "json", "--chain", "goerli", "-vvv", "--ffi", "--memory-limit", "64"],
    )
    assert result.exit_code == 0, result.output
    values = json.loads(result.output)
    assert values["chain_id"] == "goerli"
    assert values["verbosity"] == 3
    assert values["ffi"] is True
    assert values["memory_limit"] == 64


def test_show_with_config_file(runner, tmp_path: Path):
    """
    Test that flags take precedence over the configuration file.
    """
    project = tmp_path / "project"
    project.mkdir()
    (project / "evm.yaml").write_text(
        "profile:\n  default:\n    chain_id: 10\n    gas_price: 3\n    ffi: true\n"
    )
    result = runner.invoke(
        evm_config, ["show", "--format", "json", "--root", str(project), "--chain-id", "1"]
    )
    assert result.exit_code == 0, result.output
    values = json.loads(result.output)
    assert values["chain_id"] == "mainnet"
    assert values["gas_price"] == 3
    assert values["ffi"] is True


def test_show_table(runner):
    """
    Test the table output format.
    """
    result = runner.invoke(evm_config, ["show", "--format", "table", "--gas-price", "5"])
    assert result.exit_code == 0, result.output
    assert "gas_price" in result.output
    assert "profile: default" in result.output


def test_show_invalid_config(runner, tmp_path: Path):
    """
    Test that an invalid configuration file is reported as an error.
    """
    (tmp_path / "evm.yaml").write_text("profile:\n  default:\n    block_number: -5\n")
    result = runner.invoke(evm_config, ["show"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_show_undecodable_config(runner, tmp_path: Path):
    """
    Test that a configuration file that is not valid UTF-8 is reported as an error.
    """
    (tmp_path / "evm.yaml").write_bytes(b"\xff\xfe\x00\x01")
    result = runner.invoke(evm_config, ["show", "--root", str(tmp_path)])
    assert result.exit_code == 1
    assert not isinstance(result.exception, UnicodeDecodeError)
    assert "Invalid YAML in configuration file" in result.output


def test_show_invalid_balance(runner, monkeypatch):
    """
    Test that out-of-range or non-finite balances are reported as errors.
    """
    monkeypatch.setenv("EVM_INITIAL_BALANCE", "1e400 ether")
    result = runner.invoke(evm_config, ["show"])
    assert result.exit_code == 1
    assert "initial_balance" in result.output

    result = runner.invoke(evm_config, ["show", "--initial-balance", "inf"])
    assert result.exit_code == 2
    assert "--initial-balance" in result.output


def test_fork_url(runner):
    """
    Test that the fork url is printed when given.
    """
    result = runner.invoke(evm_config, ["fork-url", "--rpc-url", "https://eth.example"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "https://eth.example"


def test_fork_url_missing(runner):
    """
    Test that a missing fork url names the missing flag.
    """
    result = runner.invoke(evm_config, ["fork-url"])
    assert result.exit_code == 1
    assert "Missing `--fork-url` field." in result.output


def test_fork_scoped_flag_without_fork_url(runner):
    """
    Test that fork-scoped flags are rejected without a fork url.
    """
    result = runner.invoke(evm_config, ["show", "--fork-block-number", "100"])
    assert result.exit_code == 2
    assert "requires '--fork-url'" in result.output


def test_invalid_log_level(runner):
    """
    Test that an unknown log level is rejected.
    """
    result = runner.invoke(evm_config, ["--log-level", "chatty", "show"])
    assert result.exit_code == 2
    assert "Invalid log level" in result.output
