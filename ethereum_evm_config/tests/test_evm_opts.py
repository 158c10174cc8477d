"""
Tests for the typed execution options extracted from a configuration.
"""

import pytest

from ethereum_evm_base_types import UINT64_MAX, Chain

from ..config import DEFAULT_SENDER, Config
from ..errors import MissingFieldError
from ..evm_opts import DEFAULT_CHAIN_ID, DEFAULT_COMPUTE_UNITS_PER_SECOND, EvmOpts
from ..figment import Figment
from ..providers import Serialized


def test_from_default_config():
    """
    Test the execution options built from the default configuration.
    """
    opts = EvmOpts.from_config(Config())
    assert not opts.is_fork()
    assert opts.sender == DEFAULT_SENDER
    assert opts.env.tx_origin == DEFAULT_SENDER
    assert opts.env.chain_id is None
    assert opts.resolved_chain_id() == DEFAULT_CHAIN_ID == 31337
    assert opts.get_compute_units_per_second() == DEFAULT_COMPUTE_UNITS_PER_SECOND
    with pytest.raises(MissingFieldError, match="Missing `--fork-url` field."):
        opts.ensure_fork_url()


@pytest.mark.parametrize(
    "values, expected",
    [
        ({}, DEFAULT_COMPUTE_UNITS_PER_SECOND),
        ({"compute_units_per_second": 10}, 10),
        ({"compute_units_per_second": 10, "no_rpc_rate_limit": True}, UINT64_MAX),
        ({"no_rpc_rate_limit": True}, UINT64_MAX),
    ],
)
def test_compute_units_per_second(values, expected: int):
    """
    Test the compute units per second budget of a fork provider.
    """
    values = {"eth_rpc_url": "http://localhost:8545"} | values
    opts = EvmOpts.from_figment(Figment().merge(Serialized(values)))
    assert opts.get_compute_units_per_second() == expected


def test_chain_id():
    """
    Test that a configured chain id is used as is.
    """
    opts = EvmOpts.from_config(Config(chain_id="sepolia"))
    assert opts.resolved_chain_id() == Chain("sepolia")
    assert opts.env.chain_id == 11155111


def test_options_are_frozen():
    """
    Test that the execution options cannot be modified.
    """
    opts = EvmOpts.from_config(Config())
    with pytest.raises(ValueError):
        opts.ffi = True  # type: ignore[misc]
