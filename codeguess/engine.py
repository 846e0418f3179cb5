"""
Pure game logic (no console, no HTTP, no storage).
Each guess gets two feedback numbers:
- positional: how many indices are exactly correct (right digit, right place)
- value_only: digits that appear in the secret but sit at another index

Digits never repeat inside a code, so no digit can match more than once
on either side and a simple presence table is enough.
"""

from typing import List

from .types import CODE_LENGTH, Code, Score, Shuffler

DIGIT_VALUES = 10


def generate_secret(shuffle: Shuffler) -> Code:
    """
    The first four entries of a shuffled 0..9 are distinct by construction,
    so the secret never goes through the guess validator.
    """
    digits = shuffle(DIGIT_VALUES)
    return list(digits[:CODE_LENGTH])


def score_guess(guess: Code, secret: Code) -> Score:
    """
    Example:
      secret = [1, 2, 3, 4]
      guess  = [1, 2, 3, 5]
      positional = 3  (1, 2 and 3 sit where they should)
      value_only = 0  (5 is not in the secret)
    """
    present: List[bool] = [False] * DIGIT_VALUES
    for digit in secret:
        present[digit] = True

    positional = 0
    value_matches = 0
    for i in range(CODE_LENGTH):
        if guess[i] == secret[i]:
            positional += 1
        # counts the positional hits too
        if present[guess[i]]:
            value_matches += 1

    return Score(positional=positional, value_only=value_matches - positional)


def is_win(score: Score) -> bool:
    """Win = every digit in the right place."""
    return score.positional == CODE_LENGTH


def format_code(code: Code) -> str:
    return "".join(str(d) for d in code)
