"""
Memory registers: ten addressable scalar slots.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import MEMORY_SLOTS


@dataclass
class MemoryRegisters:
    """
    Ten scalar slots addressed 0-9.

    Every operation is O(1) and silently ignores an out-of-range index;
    ``recall`` returns 0.0 in that case.
    """

    slots: list[float] = field(default_factory=lambda: [0.0] * MEMORY_SLOTS)

    def _valid(self, index: int) -> bool:
        return 0 <= index < MEMORY_SLOTS

    def store(self, index: int, value: float) -> None:
        if self._valid(index):
            self.slots[index] = float(value)

    def recall(self, index: int) -> float:
        if self._valid(index):
            return self.slots[index]
        return 0.0

    def add(self, index: int, value: float) -> None:
        if self._valid(index):
            self.slots[index] += value

    def subtract(self, index: int, value: float) -> None:
        if self._valid(index):
            self.slots[index] -= value

    def clear_one(self, index: int) -> None:
        if self._valid(index):
            self.slots[index] = 0.0

    def clear_all(self) -> None:
        for i in range(MEMORY_SLOTS):
            self.slots[i] = 0.0

    def sum_all(self) -> float:
        return sum(self.slots)
