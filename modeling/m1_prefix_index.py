"""
m1_prefix_index.py
──────────────────
String-keyed record store with dense integer ordinals.

Every new key receives the ordinal `size()` at insertion time. Ordinals are
never reused or renumbered, so chain edges can reference successors by
ordinal and resolve them back to strings through `key_of()`.
"""

from typing import Iterator, Optional


class ChainNode:
    """Frequency record for a token (root) or a chain edge (neighbor)."""

    __slots__ = ("freq", "ordinal", "neighbors")

    def __init__(self, freq: int = 1, ordinal: int = -1):
        self.freq = freq
        self.ordinal = ordinal
        self.neighbors: dict[int, "ChainNode"] = {}

    def __repr__(self) -> str:
        return f"ChainNode(freq={self.freq}, ordinal={self.ordinal}, edges={len(self.neighbors)})"


class PrefixIndex:
    """
    Two paired containers: a hashed map key → record and a growable list
    ordinal → key for O(1) reverse lookup.
    """

    def __init__(self):
        self._records: dict = {}
        self._keys: list[str] = []

    def get(self, key: str):
        return self._records.get(key)

    def put(self, key: str, record) -> int:
        """
        Store `record` under `key` and return its ordinal.
        A new key gets ordinal `size()`; replacing a record keeps the old one.
        """
        if not key:
            raise ValueError("Empty key.")
        if key in self._records:
            ordinal = self._records[key].ordinal
        else:
            ordinal = len(self._keys)
            self._keys.append(key)
        record.ordinal = ordinal
        self._records[key] = record
        return ordinal

    def key_of(self, ordinal: int) -> str:
        return self._keys[ordinal]

    def ordinal_of(self, key: str) -> Optional[int]:
        record = self._records.get(key)
        return None if record is None else record.ordinal

    def size(self) -> int:
        return len(self._keys)

    def keys(self) -> Iterator[str]:
        """Keys in insertion (= ordinal) order."""
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key) -> bool:
        return key in self._records

    def __iter__(self) -> Iterator[str]:
        return self.keys()
