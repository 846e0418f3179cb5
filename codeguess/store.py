"""
In-memory store
Holds match state in memory for the API, for the life of the process only.
"""

import logging
from dataclasses import dataclass, field
from threading import RLock
from time import time
from typing import Dict, List, Optional
from uuid import uuid4

from .engine import format_code
from .match import (
    MatchState,
    Player,
    TurnFeedback,
    is_complete,
    new_match,
    restart_match,
    take_turn,
)
from .types import Code, Shuffler

logger = logging.getLogger("codeguess.store")


@dataclass
class GuessEntry:
    player: str
    round_number: int
    guess: Code
    total_correct: int
    positional_correct: int
    message: str
    timestamp: float


@dataclass
class Match:
    id: str
    state: MatchState
    history: List[GuessEntry] = field(default_factory=list)
    created_at: float = field(default_factory=time)
    updated_at: float = field(default_factory=time)


@dataclass
class GuessOutcome:
    match: Match
    feedback: Optional[TurnFeedback]
    finished: List[Player] = field(default_factory=list)


def feedback_message(feedback: TurnFeedback) -> str:
    # Build a message without revealing which digits are correct
    if feedback.won:
        return f"{feedback.player} cracked their code and finished in place {feedback.rank}!"
    if feedback.total_correct == 0:
        return "all incorrect"
    return (
        f"{feedback.total_correct} correct number(s) and "
        f"{feedback.positional_correct} correct location(s)"
    )


class MatchStore:
    def __init__(self) -> None:
        self._matches: Dict[str, Match] = {}
        self._lock = RLock()

    def create(
        self,
        names: List[str],
        shuffle: Shuffler,
        start_index: Optional[int] = None,
        require_final_guess: bool = False,
    ) -> Match:
        state = new_match(names, shuffle, start_index=start_index, require_final_guess=require_final_guess)
        match = Match(id=str(uuid4()), state=state)
        with self._lock:
            self._matches[match.id] = match
        logger.info("Stored match %s", match.id)
        return match

    def get(self, match_id: str) -> Optional[Match]:
        with self._lock:
            return self._matches.get(match_id)

    def guess(self, match_id: str, attempt: Code) -> Optional[GuessOutcome]:
        with self._lock:
            match = self._matches.get(match_id)
            if match is None:
                return None

            if is_complete(match.state):
                # If the match already ended, just return it (ignore extra guesses)
                return GuessOutcome(match=match, feedback=None)

            result = take_turn(match.state, attempt)
            feedback = result.feedback

            match.history.append(
                GuessEntry(
                    player=feedback.player,
                    round_number=feedback.round_number,
                    guess=list(attempt),
                    total_correct=feedback.total_correct,
                    positional_correct=feedback.positional_correct,
                    message=feedback_message(feedback),
                    timestamp=time(),
                )
            )
            match.state = result.state
            match.updated_at = time()
            logger.debug("Match %s: %s guessed %s", match_id, feedback.player, format_code(attempt))

            return GuessOutcome(match=match, feedback=feedback, finished=list(result.finished))

    def restart(self, match_id: str, shuffle: Shuffler, start_index: Optional[int] = None) -> Optional[Match]:
        """Same players, fresh secrets, history cleared; the id stays."""
        with self._lock:
            match = self._matches.get(match_id)
            if match is None:
                return None
            match.state = restart_match(match.state, shuffle, start_index=start_index)
            match.history = []
            match.updated_at = time()
            logger.info("Restarted match %s", match_id)
            return match
