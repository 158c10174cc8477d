"""
Layered configuration for EVM execution.

Loads defaults, the project's `evm.yaml` and `EVM_*` environment variables into a
`Figment` that command-line overlays are merged into, and extracts typed options from it.
"""

from .config import (
    CONFIG_FILENAME,
    DEFAULT_GAS_LIMIT,
    DEFAULT_INITIAL_BALANCE,
    DEFAULT_MEMORY_LIMIT,
    DEFAULT_SENDER,
    ENV_PREFIX,
    PROFILE_ENV_VAR,
    Config,
)
from .errors import ConfigError, InvalidTypeError, MissingFieldError
from .evm_opts import DEFAULT_CHAIN_ID, DEFAULT_COMPUTE_UNITS_PER_SECOND, EvmOpts, ExecutorEnv
from .figment import DEFAULT_PROFILE, Figment, Metadata, Provider
from .providers import Env, Serialized, YamlFile

__all__ = (
    "CONFIG_FILENAME",
    "Config",
    "ConfigError",
    "DEFAULT_CHAIN_ID",
    "DEFAULT_COMPUTE_UNITS_PER_SECOND",
    "DEFAULT_GAS_LIMIT",
    "DEFAULT_INITIAL_BALANCE",
    "DEFAULT_MEMORY_LIMIT",
    "DEFAULT_PROFILE",
    "DEFAULT_SENDER",
    "ENV_PREFIX",
    "Env",
    "EvmOpts",
    "ExecutorEnv",
    "Figment",
    "InvalidTypeError",
    "Metadata",
    "MissingFieldError",
    "PROFILE_ENV_VAR",
    "Provider",
    "Serialized",
    "YamlFile",
)
