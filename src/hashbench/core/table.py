from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from .strategies import HashFunction, index_for

ID_WIDTH = 9


class RegistryIdGenerator:
    """Monotonic source of zero-padded registry identifiers.

    One generator is shared by every table built during a benchmark run so the
    identifiers keep increasing across trials.
    """

    __slots__ = ("_count",)

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("start must be >= 0")
        self._count = start

    @property
    def issued(self) -> int:
        return self._count

    def next_id(self) -> str:
        self._count += 1
        return f"{self._count:0{ID_WIDTH}d}"


@dataclass(frozen=True, slots=True)
class Registry:
    value: int
    id: str


@dataclass(slots=True)
class Node:
    registry: Registry
    next: Optional["Node"] = None


class ChainedHashTable:
    """Fixed-capacity hash table resolving collisions with singly linked chains."""

    __slots__ = ("_capacity", "_strategy", "_slots", "_collisions", "_size", "_ids")

    def __init__(
        self,
        capacity: int,
        strategy: HashFunction | str = HashFunction.MODULO,
        ids: Optional[RegistryIdGenerator] = None,
    ) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise ValueError(f"capacity must be an integer (got {capacity!r})")
        if capacity <= 0:
            raise ValueError(f"capacity must be > 0 (got {capacity})")
        self._capacity = capacity
        self._strategy = HashFunction.parse(strategy)
        self._slots: List[Optional[Node]] = [None] * capacity
        self._collisions = 0
        self._size = 0
        self._ids = ids if ids is not None else RegistryIdGenerator()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def strategy(self) -> HashFunction:
        return self._strategy

    @property
    def collisions(self) -> int:
        return self._collisions

    def collision_count(self) -> int:
        return self._collisions

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: object) -> bool:
        return isinstance(key, int) and key >= 0 and self.search(key) is not None

    def load_factor(self) -> float:
        return self._size / self._capacity

    def slot_for(self, key: int) -> int:
        return index_for(self._strategy, key, self._capacity)

    def insert(self, key: int) -> Registry:
        registry = Registry(key, self._ids.next_id())
        self.insert_registry(registry)
        return registry

    def insert_registry(self, registry: Registry) -> None:
        idx = self.slot_for(registry.value)
        node = Node(registry)
        current = self._slots[idx]
        if current is None:
            self._slots[idx] = node
        else:
            self._collisions += 1
            while current.next is not None:
                current = current.next
            current.next = node
        self._size += 1

    def search(self, key: int) -> Optional[Registry]:
        current = self._slots[self.slot_for(key)]
        while current is not None:
            if current.registry.value == key:
                return current.registry
            current = current.next
        return None

    def chain(self, index: int) -> Iterator[Registry]:
        if not 0 <= index < self._capacity:
            raise IndexError(f"slot {index} out of range [0, {self._capacity})")
        current = self._slots[index]
        while current is not None:
            yield current.registry
            current = current.next

    def chain_lengths(self) -> List[int]:
        lengths: List[int] = []
        for head in self._slots:
            length = 0
            current = head
            while current is not None:
                length += 1
                current = current.next
            lengths.append(length)
        return lengths

    def max_chain_len(self) -> int:
        return max(self.chain_lengths())

    def occupied_slots(self) -> int:
        return sum(1 for head in self._slots if head is not None)

    def items(self) -> Iterator[Registry]:
        for index in range(self._capacity):
            yield from self.chain(index)


def chain_length_histogram(table: ChainedHashTable) -> List[List[int]]:
    histogram: Dict[int, int] = defaultdict(int)
    for length in table.chain_lengths():
        histogram[length] += 1
    return [[length, count] for length, count in sorted(histogram.items())]


__all__ = [
    "ChainedHashTable",
    "ID_WIDTH",
    "Node",
    "Registry",
    "RegistryIdGenerator",
    "chain_length_histogram",
]
