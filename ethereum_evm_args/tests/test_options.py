"""
Tests for the flag table and the click options built from it.
"""

import click
import pytest
from click.testing import CliRunner

from ethereum_evm_config import Config

from ..evm import EnvArgs, EvmArgs, evm_options
from ..options import ENV_ARGS, EVM_ARGS, ArgSpec, check_requirements


def test_table_matches_models():
    """
    Test that every overlay attribute has exactly one flag and vice versa.
    """
    assert {arg_spec.name for arg_spec in ENV_ARGS} == set(EnvArgs.model_fields)
    assert {arg_spec.name for arg_spec in EVM_ARGS} == set(EvmArgs.model_fields) - {"env"}


def test_table_keys_are_config_keys():
    """
    Test that every configuration key of the table exists in the base configuration.
    """
    keys = [arg_spec.key for arg_spec in EVM_ARGS + ENV_ARGS]
    assert len(keys) == len(set(keys))
    assert set(keys) <= set(Config.model_fields)


def test_flags_are_unique():
    """
    Test that no flag or alias is declared twice.
    """
    flags = [flag for arg_spec in EVM_ARGS + ENV_ARGS for flag in arg_spec.flags]
    assert len(flags) == len(set(flags))


@pytest.mark.parametrize(
    "arg_spec, value, participates",
    [
        (ArgSpec(name="a", flags=("--a",), help="", kind="flag"), False, False),
        (ArgSpec(name="a", flags=("--a",), help="", kind="flag"), True, True),
        (ArgSpec(name="a", flags=("--a",), help="", kind="count"), 0, False),
        (ArgSpec(name="a", flags=("--a",), help="", kind="count"), 2, True),
        (ArgSpec(name="a", flags=("--a",), help=""), None, False),
        (ArgSpec(name="a", flags=("--a",), help=""), 0, True),
        (ArgSpec(name="a", flags=("--a",), help=""), "", True),
    ],
)
def test_participates(arg_spec: ArgSpec, value, participates: bool):
    """
    Test which values of each kind of flag take part in the overlay.
    """
    assert arg_spec.participates(value) is participates


def test_check_requirements():
    """
    Test the requirement check outside of a click context.
    """
    check_requirements(EVM_ARGS, {"fork_url": None, "fork_block_number": None})
    check_requirements(EVM_ARGS, {"fork_url": "http://node", "fork_block_number": 1})
    with pytest.raises(click.UsageError, match="'--fork-block-number' requires '--fork-url'"):
        check_requirements(EVM_ARGS, {"fork_url": None, "fork_block_number": 1})


@click.command()
@evm_options
def show_args(evm_args: EvmArgs):
    """Print the overlay of the given arguments."""
    click.echo(sorted(evm_args.data()["default"].items()))


@pytest.fixture
def runner(monkeypatch):
    """Provides a Click CliRunner for invoking command-line interfaces."""
    monkeypatch.delenv("EVM_PROFILE", raising=False)
    return CliRunner()


def test_decorated_command(runner):
    """
    Test that a decorated command receives the constructed overlay.
    """
    result = runner.invoke(show_args, ["--chain", "goerli", "-vv", "--ffi"])
    assert result.exit_code == 0, result.output
    assert "('chain_id', Chain('goerli'))" in result.output
    assert "('ffi', True)" in result.output
    assert "('verbosity', 2)" in result.output


def test_decorated_command_help(runner):
    """
    Test that the flags and their aliases are listed in the help.
    """
    result = runner.invoke(show_args, ["--help"])
    assert result.exit_code == 0
    for flag in ("--fork-url", "--rpc-url", "--chain-id", "--chain", "--cups", "--memory-limit"):
        assert flag in result.output


def test_decorated_command_requirements(runner):
    """
    Test that a decorated command rejects fork-scoped flags without `--fork-url`.
    """
    result = runner.invoke(show_args, ["--fork-block-number", "1"])
    assert result.exit_code == 2
    assert "requires '--fork-url'" in result.output

    result = runner.invoke(show_args, ["--gas-limit", "lots"])
    assert result.exit_code == 2
    assert "not a valid unsigned integer" in result.output
