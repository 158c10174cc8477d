"""
Command-line arguments for configuring the EVM.

`EvmArgs` and `EnvArgs` take the highest precedence in the configuration hierarchy. All of
their values are opt-in: defaults live in `ethereum_evm_config.Config`, which always has
them. The expected workflow is:

1. load the layered configuration (`Config.figment()`),
2. merge the parsed `EvmArgs` into it,
3. extract `EvmOpts` from the merged figment.

```python
figment = Config.figment(root).merge(EvmArgs.parse_from(sys.argv[1:]))
opts = EvmOpts.from_figment(figment)
```
"""

from typing import Any, ClassVar, Dict, Iterable, List, Optional, Tuple

import click
from pydantic import Field, ValidationError

from ethereum_evm_base_types import Address, Chain, FrozenModel, Hash, Uint64, Wei
from ethereum_evm_config import Config, InvalidTypeError, Metadata, MissingFieldError, Provider
from ethereum_evm_config.figment import ProfileMap
from ethereum_evm_config.logging import get_logger

from .options import ENV_ARGS, EVM_ARGS, ArgSpec, click_options, parse_params

logger = get_logger(__name__)


class OverlayArgs(FrozenModel):
    """Base class of argument groups that overlay configuration keys."""

    arg_specs: ClassVar[Tuple[ArgSpec, ...]] = ()
    prog_name: ClassVar[str] = "evm"

    @classmethod
    def from_params(cls, params: Dict[str, Any]):
        """Build the arguments from parsed flag values keyed by attribute name."""
        return cls.model_validate(params)

    @classmethod
    def parse_from(cls, argv: Iterable[str]):
        """
        Parse a list of command-line arguments (without the program name).

        Raises `click.UsageError` on unknown flags, invalid values or a fork-scoped flag
        given without `--fork-url`.
        """
        params = parse_params(cls.all_arg_specs(), argv, cls.prog_name)
        try:
            return cls.from_params(params)
        except ValidationError as e:
            raise click.UsageError(str(e)) from e

    @classmethod
    def all_arg_specs(cls) -> Tuple[ArgSpec, ...]:
        """The flags parsed by this group, including nested groups."""
        return cls.arg_specs

    def overrides(self) -> List[Tuple[str, Any]]:
        """
        Return the `(config key, value)` pairs that participate in the overlay.

        Unset values, `False` flags and a zero verbosity are left out so that they do not
        mask values from the base configuration.
        """
        overrides = []
        for arg_spec in self.arg_specs:
            value = getattr(self, arg_spec.name)
            if arg_spec.participates(value):
                overrides.append((arg_spec.key, value))
        return overrides


class EnvArgs(OverlayArgs):
    """Configures the executor environment during tests."""

    arg_specs: ClassVar[Tuple[ArgSpec, ...]] = ENV_ARGS
    prog_name: ClassVar[str] = "evm-env"

    gas_limit: Optional[Uint64] = None
    code_size_limit: Optional[Uint64] = None
    chain_id: Optional[Chain] = None
    gas_price: Optional[Uint64] = None
    block_base_fee_per_gas: Optional[Uint64] = None
    tx_origin: Optional[Address] = None
    block_coinbase: Optional[Address] = None
    block_timestamp: Optional[Uint64] = None
    block_number: Optional[Uint64] = None
    block_difficulty: Optional[Uint64] = None
    block_prevrandao: Optional[Hash] = None
    block_gas_limit: Optional[Uint64] = None
    memory_limit: Optional[Uint64] = None


class EvmArgs(OverlayArgs, Provider):
    """
    EVM options given on the command line.

    Acts as a configuration provider so that it can be merged on top of the layered
    configuration, under the currently selected profile.
    """

    arg_specs: ClassVar[Tuple[ArgSpec, ...]] = EVM_ARGS
    prog_name: ClassVar[str] = "evm"

    fork_url: Optional[str] = None
    fork_block_number: Optional[Uint64] = None
    fork_retry_backoff: Optional[Uint64] = None
    no_storage_caching: bool = False
    initial_balance: Optional[Wei] = None
    sender: Optional[Address] = None
    ffi: bool = False
    verbosity: int = Field(0, ge=0, le=255)
    env: EnvArgs = Field(default_factory=EnvArgs)
    compute_units_per_second: Optional[Uint64] = None
    no_rpc_rate_limit: bool = False

    @classmethod
    def all_arg_specs(cls) -> Tuple[ArgSpec, ...]:  # noqa: D102
        return EVM_ARGS + ENV_ARGS

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "EvmArgs":
        """Build the arguments, routing environment flags into the nested `env` group."""
        env_names = {arg_spec.name for arg_spec in ENV_ARGS}
        env = EnvArgs.from_params({k: v for k, v in params.items() if k in env_names})
        return cls.model_validate(
            {k: v for k, v in params.items() if k not in env_names} | {"env": env}
        )

    def ensure_fork_url(self) -> str:
        """Ensure that the fork url exists and return it."""
        if self.fork_url is None:
            raise MissingFieldError("--fork-url")
        return self.fork_url

    ensure_fork_endpoint = ensure_fork_url

    def overrides(self) -> List[Tuple[str, Any]]:
        """Return the overlay pairs of the EVM options followed by the environment ones."""
        return super().overrides() + self.env.overrides()

    def metadata(self) -> Metadata:  # noqa: D102
        return Metadata("Evm Opts Provider")

    def data(self) -> ProfileMap:
        """
        Return the overrides scoped under the selected profile.

        Raises `InvalidTypeError` if the overrides cannot be represented as a key/value map.
        """
        overrides = self.overrides()
        values: Dict[str, Any] = {}
        for item in overrides:
            if not isinstance(item, tuple) or len(item) != 2 or not isinstance(item[0], str):
                raise InvalidTypeError(item, "(key, value) pair")
            key, value = item
            if key in values:
                raise InvalidTypeError(overrides, f"map with a single `{key}` entry")
            values[key] = value
        logger.verbose(f"Command-line overrides: {', '.join(values) or 'none'}")
        return {Config.selected_profile(): values}

    as_overlay_map = data


evm_options = click_options(EVM_ARGS + ENV_ARGS, EvmArgs.from_params, dest="evm_args")
"""Decorator adding every EVM flag to a click command; the command receives `evm_args`."""
