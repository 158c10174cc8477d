"""
Declarative table of the EVM command-line flags and the click plumbing built from it.

Each `ArgSpec` binds an overlay attribute to its flag names, help text, value type, the
configuration key it overrides and, for fork-scoped flags, the flag it requires.
"""

import functools
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Literal, Sequence, Tuple

import click
from pydantic import ValidationError

from ethereum_evm_base_types import UINT64_MAX, Address, Chain, Hash, Wei, to_number


class ValueParamType(click.ParamType):
    """A click parameter type that converts values with one of the base type constructors."""

    def __init__(self, name: str, converter: Callable[[Any], Any]):
        """Initialize the parameter type with its display name and converter."""
        self.name = name
        self.converter = converter

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None):
        """Convert the raw value, reporting conversion failures as bad parameters."""
        try:
            return self.converter(value)
        except ValueError as e:
            self.fail(f"{value!r} is not a valid {self.name}: {e}", param, ctx)


def to_uint64(value: Any) -> int:
    """Convert a decimal or hex value into an unsigned 64-bit integer."""
    number = to_number(value)
    if not 0 <= number <= UINT64_MAX:
        raise ValueError(f"{number} is out of range for an unsigned 64-bit integer")
    return number


UINT64 = ValueParamType("unsigned integer", to_uint64)
ADDRESS = ValueParamType("address", Address)
HASH = ValueParamType("32-byte hash", Hash)
WEI = ValueParamType("wei amount", Wei)
CHAIN = ValueParamType("chain", Chain)


@dataclass(frozen=True)
class ArgSpec:
    """Binding of an overlay attribute to its command-line flag."""

    name: str
    flags: Tuple[str, ...]
    help: str
    kind: Literal["value", "flag", "count"] = "value"
    type: click.ParamType | None = None
    value_name: str | None = None
    requires: str | None = None
    config_key: str | None = None

    @property
    def key(self) -> str:
        """The configuration key this attribute overrides."""
        return self.config_key or self.name

    @property
    def flag(self) -> str:
        """The primary (first) flag name."""
        return self.flags[0]

    def participates(self, value: Any) -> bool:
        """Whether `value` is an override that must be carried into the configuration."""
        if self.kind == "flag":
            return bool(value)
        if self.kind == "count":
            return value > 0
        return value is not None

    def option_decls(self) -> Tuple[str, ...]:
        """Flag declarations followed by the destination name."""
        return (*self.flags, self.name)

    def option_attrs(self) -> Dict[str, Any]:
        """Keyword arguments for `click.Option`."""
        if self.kind == "flag":
            return {"is_flag": True, "default": False, "help": self.help}
        if self.kind == "count":
            return {"count": True, "default": 0, "help": self.help}
        return {
            "type": self.type,
            "default": None,
            "metavar": self.value_name,
            "help": self.help,
        }

    def to_click_option(self) -> click.Option:
        """Build the click option of this flag."""
        return click.Option(self.option_decls(), **self.option_attrs())


FORK_URL = "fork_url"

EVM_ARGS: Tuple[ArgSpec, ...] = (
    ArgSpec(
        name=FORK_URL,
        flags=("--fork-url", "-f", "--rpc-url"),
        value_name="URL",
        config_key="eth_rpc_url",
        help=(
            "Fetch state over a remote endpoint instead of starting from an empty state. "
            "If you want to fetch state from a specific block number, see "
            "--fork-block-number."
        ),
    ),
    ArgSpec(
        name="fork_block_number",
        flags=("--fork-block-number",),
        type=UINT64,
        value_name="BLOCK",
        requires=FORK_URL,
        help="Fetch state from a specific block number over a remote endpoint. See --fork-url.",
    ),
    ArgSpec(
        name="fork_retry_backoff",
        flags=("--fork-retry-backoff",),
        type=UINT64,
        value_name="BACKOFF",
        requires=FORK_URL,
        help="Initial retry backoff on encountering errors. See --fork-url.",
    ),
    ArgSpec(
        name="no_storage_caching",
        flags=("--no-storage-caching",),
        kind="flag",
        help=(
            "Explicitly disables the use of RPC caching. All storage slots are read entirely "
            "from the endpoint. This flag overrides the project's configuration file. "
            "See --fork-url."
        ),
    ),
    ArgSpec(
        name="initial_balance",
        flags=("--initial-balance",),
        type=WEI,
        value_name="BALANCE",
        help="The initial balance of deployed test contracts.",
    ),
    ArgSpec(
        name="sender",
        flags=("--sender",),
        type=ADDRESS,
        value_name="ADDRESS",
        help="The address which will be executing tests.",
    ),
    ArgSpec(
        name="ffi",
        flags=("--ffi",),
        kind="flag",
        help="Enables the FFI cheatcode.",
    ),
    ArgSpec(
        name="verbosity",
        flags=("--verbosity", "-v"),
        kind="count",
        help=(
            "Verbosity of the EVM. Pass multiple times to increase the verbosity "
            "(e.g. -v, -vv, -vvv). 2: print logs for all tests; 3: print execution traces "
            "for failing tests; 4: print execution traces for all tests, and setup traces "
            "for failing tests; 5: print execution and setup traces for all tests."
        ),
    ),
    ArgSpec(
        name="compute_units_per_second",
        flags=("--compute-units-per-second", "--cups"),
        type=UINT64,
        value_name="CUPS",
        requires=FORK_URL,
        help=(
            "Sets the number of assumed available compute units per second for this "
            "provider (default: 330). See --fork-url."
        ),
    ),
    ArgSpec(
        name="no_rpc_rate_limit",
        flags=("--no-rpc-rate-limit", "--no-rate-limit"),
        kind="flag",
        requires=FORK_URL,
        help="Disables rate limiting for this node provider. See --fork-url.",
    ),
)
"""Flags of the EVM options group."""

ENV_ARGS: Tuple[ArgSpec, ...] = (
    ArgSpec(
        name="gas_limit",
        flags=("--gas-limit",),
        type=UINT64,
        value_name="GAS_LIMIT",
        help="The block gas limit.",
    ),
    ArgSpec(
        name="code_size_limit",
        flags=("--code-size-limit",),
        type=UINT64,
        value_name="CODE_SIZE",
        help=(
            "EIP-170: Contract code size limit in bytes. Useful to increase this because of "
            "tests. By default, it is 0x6000 (~25kb)."
        ),
    ),
    ArgSpec(
        name="chain_id",
        flags=("--chain-id", "--chain"),
        type=CHAIN,
        value_name="CHAIN_ID",
        help="The chain ID, either numeric or a chain name (e.g. mainnet, goerli).",
    ),
    ArgSpec(
        name="gas_price",
        flags=("--gas-price",),
        type=UINT64,
        value_name="GAS_PRICE",
        help="The gas price.",
    ),
    ArgSpec(
        name="block_base_fee_per_gas",
        flags=("--block-base-fee-per-gas", "--base-fee"),
        type=UINT64,
        value_name="FEE",
        help="The base fee in a block.",
    ),
    ArgSpec(
        name="tx_origin",
        flags=("--tx-origin",),
        type=ADDRESS,
        value_name="ADDRESS",
        help="The transaction origin.",
    ),
    ArgSpec(
        name="block_coinbase",
        flags=("--block-coinbase",),
        type=ADDRESS,
        value_name="ADDRESS",
        help="The coinbase of the block.",
    ),
    ArgSpec(
        name="block_timestamp",
        flags=("--block-timestamp",),
        type=UINT64,
        value_name="TIMESTAMP",
        help="The timestamp of the block.",
    ),
    ArgSpec(
        name="block_number",
        flags=("--block-number",),
        type=UINT64,
        value_name="BLOCK",
        help="The block number.",
    ),
    ArgSpec(
        name="block_difficulty",
        flags=("--block-difficulty",),
        type=UINT64,
        value_name="DIFFICULTY",
        help="The block difficulty.",
    ),
    ArgSpec(
        name="block_prevrandao",
        flags=("--block-prevrandao",),
        type=HASH,
        value_name="PREVRANDAO",
        help="The block prevrandao value. NOTE: Before merge this field was mix_hash.",
    ),
    ArgSpec(
        name="block_gas_limit",
        flags=("--block-gas-limit",),
        type=UINT64,
        value_name="GAS_LIMIT",
        help="The block gas limit.",
    ),
    ArgSpec(
        name="memory_limit",
        flags=("--memory-limit",),
        type=UINT64,
        value_name="MEMORY_LIMIT",
        help="The memory limit of the EVM in bytes (32 MB by default).",
    ),
)
"""Flags of the executor environment group."""


def check_requirements(
    specs: Iterable[ArgSpec], params: Dict[str, Any], ctx: click.Context | None = None
) -> None:
    """Raise a usage error when a flag is given without the flag it requires."""
    by_name = {arg_spec.name: arg_spec for arg_spec in specs}
    for arg_spec in by_name.values():
        if arg_spec.requires is None or not arg_spec.participates(params.get(arg_spec.name)):
            continue
        required = by_name[arg_spec.requires]
        if not required.participates(params.get(required.name)):
            raise click.UsageError(
                f"Option '{arg_spec.flag}' requires '{required.flag}' to be provided.", ctx
            )


def parse_params(
    specs: Sequence[ArgSpec], argv: Iterable[str], prog_name: str
) -> Dict[str, Any]:
    """
    Parse `argv` against the flags in `specs`.

    Returns the parsed values keyed by attribute name. Raises `click.UsageError` (or one of
    its subclasses) on unknown flags, invalid values or unmet flag requirements.
    """
    command = click.Command(prog_name, params=[arg_spec.to_click_option() for arg_spec in specs])
    ctx = command.make_context(prog_name, list(argv))
    params = dict(ctx.params)
    check_requirements(specs, params, ctx)
    return params


def click_options(
    specs: Sequence[ArgSpec], build: Callable[[Dict[str, Any]], Any], dest: str
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorate a click command with the flags in `specs`.

    The decorated function receives `build(values)` as the `dest` keyword argument instead
    of the individual flag values.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            params = {arg_spec.name: kwargs.pop(arg_spec.name) for arg_spec in specs}
            check_requirements(specs, params, click.get_current_context(silent=True))
            try:
                kwargs[dest] = build(params)
            except ValidationError as e:
                raise click.UsageError(str(e)) from e
            return func(*args, **kwargs)

        for arg_spec in reversed(specs):
            wrapper = click.option(*arg_spec.option_decls(), **arg_spec.option_attrs())(wrapper)
        return wrapper

    return decorator
