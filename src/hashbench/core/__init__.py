from .strategies import (
    GOLDEN_RATIO_FRACTION,
    HashFunction,
    folding_index,
    index_for,
    modulo_index,
    multiplicative_index,
)
from .table import (
    ChainedHashTable,
    Node,
    Registry,
    RegistryIdGenerator,
    chain_length_histogram,
)

__all__ = [
    "ChainedHashTable",
    "GOLDEN_RATIO_FRACTION",
    "HashFunction",
    "Node",
    "Registry",
    "RegistryIdGenerator",
    "chain_length_histogram",
    "folding_index",
    "index_for",
    "modulo_index",
    "multiplicative_index",
]
