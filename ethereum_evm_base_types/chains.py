"""Chain identifiers that can be given either by name or by numeric id."""

from typing import Dict

from .base_types import UINT64_MAX, ToStringSchema
from .conversions import NumberConvertible, to_number

NAMED_CHAINS: Dict[str, int] = {
    "mainnet": 1,
    "morden": 2,
    "ropsten": 3,
    "rinkeby": 4,
    "goerli": 5,
    "kovan": 42,
    "sepolia": 11155111,
    "holesky": 17000,
    "optimism": 10,
    "optimism-goerli": 420,
    "arbitrum": 42161,
    "arbitrum-goerli": 421613,
    "polygon": 137,
    "polygon-mumbai": 80001,
    "avalanche": 43114,
    "avalanche-fuji": 43113,
    "bsc": 56,
    "bsc-testnet": 97,
    "fantom": 250,
    "fantom-testnet": 4002,
    "gnosis": 100,
    "chiado": 10200,
    "moonbeam": 1284,
    "moonriver": 1285,
    "dev": 1337,
    "anvil-hardhat": 31337,
}
"""Canonical chain names and their ids."""

CHAIN_ALIASES: Dict[str, str] = {
    "ethereum": "mainnet",
    "xdai": "gnosis",
    "matic": "polygon",
    "mumbai": "polygon-mumbai",
    "binance-smart-chain": "bsc",
    "anvil": "anvil-hardhat",
    "hardhat": "anvil-hardhat",
}

_NAMES_BY_ID: Dict[int, str] = {chain_id: name for name, chain_id in NAMED_CHAINS.items()}


class Chain(int, ToStringSchema):
    """
    An EVM chain id.

    Accepts a numeric id (`5`, `"0x5"`) or a known chain name (`"goerli"`). Chains compare
    as integers, so a chain parsed from its name equals the one parsed from its id.
    """

    def __new__(cls, input_chain: "NumberConvertible | Chain"):
        """Create a new Chain object from a name or an id."""
        if isinstance(input_chain, str):
            key = input_chain.strip().lower().replace("_", "-")
            key = CHAIN_ALIASES.get(key, key)
            if key in NAMED_CHAINS:
                return super(Chain, cls).__new__(cls, NAMED_CHAINS[key])
        try:
            chain_id = to_number(input_chain)
        except ValueError:
            raise ValueError(f"Unknown chain: {input_chain!r}") from None
        if not 0 <= chain_id <= UINT64_MAX:
            raise ValueError(f"Chain id out of range: {chain_id}")
        return super(Chain, cls).__new__(cls, chain_id)

    @property
    def name(self) -> str | None:
        """Canonical name of the chain, if it is a known chain."""
        return _NAMES_BY_ID.get(int(self))

    @property
    def id(self) -> int:
        """Numeric id of the chain."""
        return int(self)

    def __str__(self) -> str:
        """Return the chain name when known, otherwise its id."""
        return self.name or str(int(self))

    def __repr__(self) -> str:
        """Return the representation of the chain."""
        return f"Chain({str(self)!r})"
