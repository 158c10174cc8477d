"""
The base configuration that command-line overlays are merged into.

Every key that can be overridden from the command line has its default here. The expected
workflow is:

1. build the layered configuration with `Config.figment()`,
2. merge the command-line overlay on top of it (`figment.merge(evm_args)`),
3. extract a `Config` (or `EvmOpts`) from the merged figment.
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import ConfigDict, Field

from ethereum_evm_base_types import Address, Chain, CopyValidateModel, Hash, Uint64, Wei

from .figment import DEFAULT_PROFILE, Figment, Provider
from .providers import Env, Serialized, YamlFile

CONFIG_FILENAME = "evm.yaml"
"""Name of the configuration file looked up in the project root."""

ENV_PREFIX = "EVM_"
"""Prefix of the environment variables that override configuration keys."""

PROFILE_ENV_VAR = "EVM_PROFILE"
"""Environment variable holding the name of the selected profile."""

DEFAULT_SENDER = Address("0x1804c8ab1f12e6bbf3894d4083f33e07309d1f38")
"""Default address executing transactions."""

DEFAULT_INITIAL_BALANCE = Wei(0xFFFFFFFFFFFFFFFFFFFFFFFF)

DEFAULT_GAS_LIMIT = 2**63 - 1

DEFAULT_MEMORY_LIMIT = 2**25
"""32 MB."""


class Config(CopyValidateModel):
    """Resolved configuration of a single profile."""

    model_config = ConfigDict(extra="forbid", validate_default=True)

    profile: str = DEFAULT_PROFILE
    """The profile these values were extracted for."""

    # Fork
    eth_rpc_url: Optional[str] = None
    """Remote endpoint state is fetched from; no forking when unset."""
    fork_block_number: Optional[Uint64] = None
    fork_retry_backoff: Optional[Uint64] = None
    no_storage_caching: bool = False
    compute_units_per_second: Optional[Uint64] = None
    no_rpc_rate_limit: bool = False

    # Execution identity
    sender: Address = DEFAULT_SENDER
    initial_balance: Wei = DEFAULT_INITIAL_BALANCE
    ffi: bool = False
    verbosity: int = Field(0, ge=0, le=255)

    # Executor environment
    gas_limit: Uint64 = DEFAULT_GAS_LIMIT
    code_size_limit: Optional[Uint64] = None
    """Contract code size limit in bytes; the EIP-170 limit applies when unset."""
    chain_id: Optional[Chain] = None
    gas_price: Optional[Uint64] = None
    block_base_fee_per_gas: Uint64 = 0
    tx_origin: Address = DEFAULT_SENDER
    block_coinbase: Address = Address(0)
    block_timestamp: Uint64 = 1
    block_number: Uint64 = 1
    block_difficulty: Uint64 = 0
    block_prevrandao: Hash = Hash(0)
    block_gas_limit: Optional[Uint64] = None
    memory_limit: Uint64 = DEFAULT_MEMORY_LIMIT

    @staticmethod
    def selected_profile() -> str:
        """Return the profile selected through the environment, `default` otherwise."""
        return os.environ.get(PROFILE_ENV_VAR) or DEFAULT_PROFILE

    @classmethod
    def figment(cls, root: Path | None = None) -> Figment:
        """
        Build the layered configuration: defaults, then the project's `evm.yaml`, then
        `EVM_*` environment variables.
        """
        root = Path.cwd() if root is None else Path(root)
        profile = cls.selected_profile()
        return (
            Figment(profile=profile)
            .merge(Serialized.defaults(cls()))
            .merge(YamlFile(root / CONFIG_FILENAME))
            .merge(Env(ENV_PREFIX, profile=profile))
        )

    @classmethod
    def from_provider(cls, provider: Figment | Provider) -> "Config":
        """Extract the configuration from a figment or from a single provider."""
        if not isinstance(provider, Figment):
            provider = Figment(profile=cls.selected_profile()).merge(provider)
        return provider.extract(cls, profile=provider.profile)

    @classmethod
    def load(cls, root: Path | None = None) -> "Config":
        """Load the configuration of the selected profile without command-line overrides."""
        return cls.from_provider(cls.figment(root))
