"""
Labels for clarity.
"""

from typing import Callable, List, NamedTuple

Digit = int  # 0 -> 9
Code = List[Digit]  # 4 distinct digits, leading zero allowed
Shuffler = Callable[[int], List[int]]  # n -> permutation of 0..n-1

CODE_LENGTH = 4
MIN_PLAYERS = 1
MAX_PLAYERS = 10


class Score(NamedTuple):
    positional: int  # right digit, right place
    value_only: int  # right digit, wrong place

    @property
    def total(self) -> int:
        return self.positional + self.value_only
