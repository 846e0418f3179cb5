"""
Turn/match state machine.

A MatchState is a plain value: every transition takes one and hands back
a new one, the old state is never touched. That keeps each step testable
on its own and lets the console and the API drive the same code.

  AwaitingGuess(player)
    -> miss: advance pointer (and maybe the round) -> AwaitingGuess(next)
    -> win:  rank, move to completed -> MatchComplete | AwaitingGuess(next)

Invalid text never gets this far; see validation.parse_guess.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from .engine import format_code, generate_secret, is_win, score_guess
from .ranking import Ranking
from .types import Code, Score, Shuffler
from .validation import validate_names

logger = logging.getLogger("codeguess.match")


class MatchComplete(ValueError):
    pass


@dataclass(frozen=True)
class Player:
    name: str
    secret: Code
    rank: Optional[int] = None


@dataclass(frozen=True)
class TurnFeedback:
    player: str
    round_number: int
    guess: Code
    score: Score
    won: bool
    rank: Optional[int] = None

    @property
    def total_correct(self) -> int:
        return self.score.total

    @property
    def positional_correct(self) -> int:
        return self.score.positional


@dataclass(frozen=True)
class MatchState:
    players: Tuple[Player, ...]
    turn_index: int = 0
    round_number: int = 1
    guesses_taken: int = 0
    ranking: Ranking = field(default_factory=Ranking)
    completed: Tuple[Player, ...] = ()
    require_final_guess: bool = False
    # seating order at setup, for restarts
    seating: Tuple[str, ...] = ()

    @property
    def current_player(self) -> Optional[Player]:
        if not self.players:
            return None
        return self.players[self.turn_index]


@dataclass(frozen=True)
class TurnResult:
    state: MatchState
    feedback: TurnFeedback
    # everyone ranked by this turn: the winner, plus an auto-finished last player
    finished: Tuple[Player, ...] = ()


def is_complete(state: MatchState) -> bool:
    return not state.players


def new_match(
    names: List[str],
    shuffle: Shuffler,
    start_index: Optional[int] = None,
    require_final_guess: bool = False,
) -> MatchState:
    """
    Deal every player a fresh secret and pick who goes first.
    start_index=None draws the starting player from the same shuffle source.
    """
    names = validate_names(names)
    players = tuple(Player(name=name, secret=generate_secret(shuffle)) for name in names)
    for player in players:
        logger.debug("Dealt %s secret %s", player.name, format_code(player.secret))

    if start_index is None:
        start_index = shuffle(len(players))[0]
    if start_index < 0 or start_index >= len(players):
        raise IndexError(f"Starting player {start_index} is out of range for {len(players)} players.")

    logger.info("New match: %s, %s starts", ", ".join(names), players[start_index].name)
    state = MatchState(
        players=players,
        turn_index=start_index,
        require_final_guess=require_final_guess,
        seating=tuple(names),
    )
    # a solo match is over before it starts unless the final guess is required
    state, _ = finish_last_player(state)
    return state


def finish_last_player(state: MatchState) -> Tuple[MatchState, Optional[Player]]:
    """
    One unranked player left: they take the next rank without guessing.
    Returns the state unchanged and None when that does not apply.
    """
    if len(state.players) != 1 or state.players[0].rank is not None or state.require_final_guess:
        return state, None

    rank, ranking = state.ranking.award_last()
    last = replace(state.players[0], rank=rank)
    logger.info("%s is the last player left, rank %s", last.name, rank)
    return replace(
        state,
        players=(),
        turn_index=0,
        ranking=ranking,
        completed=state.completed + (last,),
    ), last


def take_turn(state: MatchState, guess: Code) -> TurnResult:
    """
    Score the current player's guess and advance the match one turn.

    The round boundary is an explicit counter check: the round ends when
    the cumulative guess count is a multiple of the roster size as it was
    when this guess was taken, win or not.
    """
    if is_complete(state):
        raise MatchComplete("All players have finished; no more guesses allowed.")

    players = list(state.players)
    index = state.turn_index
    player = players[index]
    round_number = state.round_number

    score = score_guess(guess, player.secret)
    guesses_taken = state.guesses_taken + 1
    roster_size = len(players)
    logger.debug("Round %s: %s guessed %s -> %s", round_number, player.name, format_code(guess), score)

    ranking = state.ranking
    completed = list(state.completed)
    finished: List[Player] = []
    rank = None
    won = is_win(score)

    if won:
        rank, ranking = ranking.award(round_number)
        ranked = replace(player, rank=rank)
        players.pop(index)
        completed.append(ranked)
        finished.append(ranked)
        logger.info("%s cracked their code in round %s, rank %s", player.name, round_number, rank)
        # the next player slid into this slot; wrap against the shorter roster
        next_index = index % len(players) if players else 0
    else:
        next_index = (index + 1) % len(players)

    if guesses_taken % roster_size == 0:
        round_number += 1

    next_state = replace(
        state,
        players=tuple(players),
        turn_index=next_index,
        round_number=round_number,
        guesses_taken=guesses_taken,
        ranking=ranking,
        completed=tuple(completed),
    )
    next_state, last = finish_last_player(next_state)
    if last is not None:
        finished.append(last)
    if is_complete(next_state):
        logger.info("Match complete after %s guesses", guesses_taken)

    feedback = TurnFeedback(
        player=player.name,
        round_number=state.round_number,
        guess=list(guess),
        score=score,
        won=won,
        rank=rank,
    )
    return TurnResult(state=next_state, feedback=feedback, finished=tuple(finished))


def standings(state: MatchState) -> List[Player]:
    """Completed players by ascending rank; an unranked entry would sort last."""
    return sorted(state.completed, key=lambda p: (p.rank is None, p.rank or 0))


def restart_match(state: MatchState, shuffle: Shuffler, start_index: Optional[int] = None) -> MatchState:
    """Same roster and seating, new secrets, ranks cleared."""
    names = list(state.seating) or [p.name for p in state.players + state.completed]
    return new_match(
        names,
        shuffle,
        start_index=start_index,
        require_final_guess=state.require_final_guess,
    )
