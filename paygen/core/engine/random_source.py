"""
Random source — the single injectable source of randomness.

Wraps a private ``random.Random`` and a seeded ``Faker`` instance so that
a test can pin every generated value with one seed. Nothing in the
engine touches the module-level ``random`` state.
"""

from __future__ import annotations

import random
import string
from collections.abc import MutableSequence, Sequence
from typing import TypeVar

from faker import Faker

T = TypeVar("T")

ALPHA = string.ascii_letters
DIGITS = string.digits
ALPHANUMERIC = string.ascii_letters + string.digits


class RandomSource:
    """Seedable random source used by every generator.

    Args:
        seed: Optional seed. ``None`` seeds from system entropy.
        locale: Faker locale for names and companies.
    """

    def __init__(self, seed: int | None = None, locale: str = "en_GB"):
        self.seed = seed
        self._random = random.Random(seed)
        self._faker = Faker(locale)
        if seed is not None:
            self._faker.seed_instance(seed)

    # ── Primitives ──────────────────────────────────────────────

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in ``[low, high]``."""
        return self._random.randint(low, high)

    def random(self) -> float:
        return self._random.random()

    def boolean(self) -> bool:
        return self._random.random() < 0.5

    def choice(self, items: Sequence[T]) -> T:
        return self._random.choice(items)

    def sample(self, items: Sequence[T], k: int) -> list[T]:
        return self._random.sample(list(items), k)

    def shuffle(self, items: MutableSequence[T]) -> None:
        """Fisher–Yates shuffle in place."""
        for i in range(len(items) - 1, 0, -1):
            j = self._random.randint(0, i)
            items[i], items[j] = items[j], items[i]

    def string(self, length: int, alphabet: str = ALPHANUMERIC) -> str:
        return "".join(self._random.choice(alphabet) for _ in range(length))

    def digits(self, length: int) -> str:
        return self.string(length, DIGITS)

    def alpha(self, length: int) -> str:
        return self.string(length, ALPHA)

    def alphanumeric(self, length: int) -> str:
        return self.string(length, ALPHANUMERIC)

    # ── Realistic text (Faker) ──────────────────────────────────

    def company_name(self) -> str:
        return self._faker.company()

    def person_name(self) -> str:
        return self._faker.name()

    def __repr__(self) -> str:
        return f"<RandomSource seed={self.seed!r}>"
