from __future__ import annotations

import enum
import math
import random
from typing import Optional, Protocol, Union


FIRST_LETTER = ord("A")
ALPHABET_SIZE = 26

_default_rng = random.Random()


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


class InvalidWorkloadInput(ValueError):
    pass


class WorkloadMode(str, enum.Enum):
    STRING_COUNT = "string"
    NTH_PRIME = "prime"

    @classmethod
    def parse(cls, value: str) -> "WorkloadMode":
        normalized = (value or "").strip().lower()
        for mode in cls:
            if mode.value == normalized:
                return mode
        raise ValueError(
            f"Unknown workload mode {value!r}; expected one of "
            + ", ".join(m.value for m in cls)
        )

    @property
    def item_label(self) -> str:
        return "Strings" if self is WorkloadMode.STRING_COUNT else "Primes"

    @property
    def reclaims(self) -> bool:
        # String mode never gives memory back; the ledger grows until OOM.
        return self is WorkloadMode.NTH_PRIME


def generate_random_string(length: int, rng: Optional[RandomSource] = None) -> str:
    """Build ``length`` uppercase letters, one random draw per character."""
    source = rng or _default_rng
    letters = []
    for _ in range(length):
        letters.append(chr(FIRST_LETTER + source.randrange(ALPHABET_SIZE)))
    return "".join(letters)


def count_occurrences(target: str, text: str) -> int:
    # Must stay a per-character loop; str.count would not burn the CPU.
    count = 0
    for ch in text:
        if ch == target:
            count += 1
    return count


def count_letters(text: str) -> None:
    # 'A' up to but not including 'Z'.
    for code in range(FIRST_LETTER, ord("Z")):
        count_occurrences(chr(code), text)


def _is_prime(candidate: int) -> bool:
    for divisor in range(2, math.isqrt(candidate) + 1):
        if candidate % divisor == 0:
            return False
    return True


def find_nth_prime(n: int) -> int:
    """Return the n-th prime by trial division of every candidate from 2.

    Intentionally naive: every integer candidate is tested against every
    divisor up to its square root.
    """
    if n <= 0:
        raise InvalidWorkloadInput(f"invalid input: n must be >= 1, got {n}")

    found = 0
    candidate = 1
    while found < n:
        candidate += 1
        if _is_prime(candidate):
            found += 1
    return candidate


WorkItem = Union[str, int]


class WorkloadGenerator:
    def __init__(
        self,
        mode: WorkloadMode,
        string_length: int = 8192,
        nth_prime: int = 1000,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self.mode = mode
        self.string_length = string_length
        self.nth_prime = nth_prime
        self.rng = rng

    def run(self) -> WorkItem:
        if self.mode is WorkloadMode.STRING_COUNT:
            text = generate_random_string(self.string_length, self.rng)
            count_letters(text)
            return text
        return find_nth_prime(self.nth_prime)
