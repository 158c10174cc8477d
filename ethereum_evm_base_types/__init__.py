"""
Common definitions and types.
"""

from .base_types import (
    UINT64_MAX,
    UINT256_MAX,
    Address,
    Bytes,
    FixedSizeBytes,
    Hash,
    HexNumber,
    Number,
    Uint64,
    Wei,
)
from .chains import CHAIN_ALIASES, NAMED_CHAINS, Chain
from .conversions import to_bytes, to_number
from .pydantic import CopyValidateModel, EvmBaseModel, FrozenModel

__all__ = (
    "Address",
    "Bytes",
    "CHAIN_ALIASES",
    "Chain",
    "CopyValidateModel",
    "EvmBaseModel",
    "FixedSizeBytes",
    "FrozenModel",
    "Hash",
    "HexNumber",
    "NAMED_CHAINS",
    "Number",
    "UINT256_MAX",
    "UINT64_MAX",
    "Uint64",
    "Wei",
    "to_bytes",
    "to_number",
)
