"""
Explicit validation of raw player input.

Guesses: first failure wins, and each failure has its own exception so the
caller can tell the player exactly what went wrong before prompting again.
Setup answers (player count, names, starting player) are checked the same
way. None of these errors ever reach the match state machine.
"""

from typing import List, Optional

from .types import CODE_LENGTH, MAX_PLAYERS, MIN_PLAYERS, Code

ASCII_DIGITS = "0123456789"


class GuessError(ValueError):
    reason = "GuessError"
    message = "Invalid guess."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class WrongLength(GuessError):
    reason = "WrongLength"
    message = f"Guess must be exactly {CODE_LENGTH} digits."


class NonDigitCharacter(GuessError):
    reason = "NonDigitCharacter"
    message = "Input contains non-digit characters."


class RepeatedDigit(GuessError):
    reason = "RepeatedDigit"
    message = "Digits must not be repeated."


class SetupError(ValueError):
    pass


def parse_guess(text: str) -> Code:
    """
    "0493" -> [0, 4, 9, 3]
    Surrounding whitespace is ignored; anything else counts.
    """
    text = text.strip()
    if len(text) != CODE_LENGTH:
        raise WrongLength()

    # str.isdigit() would let through things like "٣" or "²"
    for ch in text:
        if ch not in ASCII_DIGITS:
            raise NonDigitCharacter()

    digits = [int(ch) for ch in text]
    if len(set(digits)) != CODE_LENGTH:
        raise RepeatedDigit()

    return digits


def parse_player_count(text: str) -> int:
    try:
        count = int(text.strip())
    except ValueError:
        raise SetupError(f"Please enter a number between {MIN_PLAYERS} and {MAX_PLAYERS}.")
    if count < MIN_PLAYERS or count > MAX_PLAYERS:
        raise SetupError(f"Please enter a number between {MIN_PLAYERS} and {MAX_PLAYERS}.")
    return count


def parse_start_selection(text: str, player_count: int) -> Optional[int]:
    """
    "0" -> None (pick at random), "1".."n" -> 0-based index.
    """
    try:
        choice = int(text.strip())
    except ValueError:
        choice = -1
    if choice == 0:
        return None
    if 1 <= choice <= player_count:
        return choice - 1
    raise SetupError(
        "Invalid selection. Please enter 0 for random, or a number corresponding to a player."
    )


def validate_names(names: List[str]) -> List[str]:
    """Names identify players inside a match, so they must be non-empty and unique."""
    if len(names) < MIN_PLAYERS or len(names) > MAX_PLAYERS:
        raise SetupError(f"A match needs between {MIN_PLAYERS} and {MAX_PLAYERS} players.")

    cleaned = [name.strip() for name in names]
    seen = set()
    for name in cleaned:
        if not name:
            raise SetupError("Player names must not be empty.")
        if name in seen:
            raise SetupError(f"Player name '{name}' is already taken.")
        seen.add(name)
    return cleaned
