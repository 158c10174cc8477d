"""
Command-line arguments that overlay the EVM configuration.
"""

from .evm import EnvArgs, EvmArgs, OverlayArgs, evm_options
from .options import ENV_ARGS, EVM_ARGS, ArgSpec, check_requirements, parse_params

__all__ = (
    "ArgSpec",
    "ENV_ARGS",
    "EVM_ARGS",
    "EnvArgs",
    "EvmArgs",
    "OverlayArgs",
    "check_requirements",
    "evm_options",
    "parse_params",
)
