"""
Typed execution options extracted from a merged configuration.

Unlike the command-line overlay, every field here is mandatory (or explicitly optional in
the executor's eyes): the values come from a `Config` whose defaults are always present.
"""

from typing import Optional

from ethereum_evm_base_types import UINT64_MAX, Address, Chain, FrozenModel, Hash, Uint64, Wei

from .config import Config
from .errors import MissingFieldError
from .figment import Figment

DEFAULT_CHAIN_ID = Chain("anvil-hardhat")
"""Chain id used when none is configured."""

DEFAULT_COMPUTE_UNITS_PER_SECOND = 330
"""Compute units per second assumed for a fork provider without an explicit limit."""


class ExecutorEnv(FrozenModel):
    """Block and transaction context the executor runs with."""

    gas_limit: Uint64
    code_size_limit: Optional[Uint64]
    chain_id: Optional[Chain]
    gas_price: Optional[Uint64]
    block_base_fee_per_gas: Uint64
    tx_origin: Address
    block_coinbase: Address
    block_timestamp: Uint64
    block_number: Uint64
    block_difficulty: Uint64
    block_prevrandao: Hash
    block_gas_limit: Optional[Uint64]


class EvmOpts(FrozenModel):
    """Options for the EVM executor and, when forking, its remote state provider."""

    env: ExecutorEnv
    fork_url: Optional[str]
    fork_block_number: Optional[Uint64]
    fork_retry_backoff: Optional[Uint64]
    no_storage_caching: bool
    compute_units_per_second: Optional[Uint64]
    no_rpc_rate_limit: bool
    initial_balance: Wei
    sender: Address
    ffi: bool
    verbosity: int
    memory_limit: Uint64

    @classmethod
    def from_config(cls, config: Config) -> "EvmOpts":
        """Build the execution options from a resolved configuration."""
        values = config.model_dump(mode="python")
        env = ExecutorEnv.model_validate(
            {name: values[name] for name in ExecutorEnv.model_fields}
        )
        return cls.model_validate(
            {
                "env": env,
                "fork_url": config.eth_rpc_url,
                **{
                    name: values[name]
                    for name in cls.model_fields
                    if name not in ("env", "fork_url")
                },
            }
        )

    @classmethod
    def from_figment(cls, figment: Figment) -> "EvmOpts":
        """Extract the configuration of the figment's profile and build the options from it."""
        return cls.from_config(Config.from_provider(figment))

    def is_fork(self) -> bool:
        """Whether state is fetched from a remote endpoint."""
        return self.fork_url is not None

    def ensure_fork_url(self) -> str:
        """Return the fork url, raising `MissingFieldError` when it is not configured."""
        if self.fork_url is None:
            raise MissingFieldError("--fork-url")
        return self.fork_url

    def get_compute_units_per_second(self) -> int:
        """Return the compute units per second budget of the fork provider."""
        if self.no_rpc_rate_limit:
            return UINT64_MAX
        if self.compute_units_per_second is not None:
            return self.compute_units_per_second
        return DEFAULT_COMPUTE_UNITS_PER_SECOND

    def resolved_chain_id(self) -> Chain:
        """Return the configured chain id, or the local development chain id."""
        if self.env.chain_id is not None:
            return self.env.chain_id
        return DEFAULT_CHAIN_ID
