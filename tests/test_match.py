"""
Testing the turn/match state machine.
Secrets are dealt through scripted_shuffle so every outcome is known.
"""

import pytest

from codeguess.match import (
    MatchComplete,
    MatchState,
    Player,
    is_complete,
    new_match,
    restart_match,
    standings,
    take_turn,
)
from codeguess.validation import SetupError

A_SECRET = [1, 2, 3, 4]
B_SECRET = [5, 6, 7, 8]
C_SECRET = [0, 9, 8, 7]
MISS = [4, 3, 2, 1]  # never a win for any secret above


def test_two_player_match_end_to_end(scripted_shuffle):
    state = new_match(["A", "B"], scripted_shuffle(A_SECRET, B_SECRET), start_index=0)
    assert state.current_player.name == "A"

    result = take_turn(state, [1, 2, 3, 5])
    assert result.feedback.player == "A"
    assert result.feedback.score == (3, 0)
    assert result.feedback.won is False
    state = result.state

    result = take_turn(state, [5, 6, 7, 9])
    assert result.feedback.player == "B"
    assert result.feedback.score == (3, 0)
    state = result.state

    result = take_turn(state, [1, 2, 3, 4])
    assert result.feedback.score == (4, 0)
    assert result.feedback.won is True
    assert result.feedback.rank == 1
    # B is left alone and auto-finishes behind A
    assert [(p.name, p.rank) for p in result.finished] == [("A", 1), ("B", 2)]

    state = result.state
    assert is_complete(state)
    assert [(p.name, p.rank) for p in standings(state)] == [("A", 1), ("B", 2)]


def test_take_turn_leaves_input_state_alone(scripted_shuffle):
    state = new_match(["A", "B"], scripted_shuffle(A_SECRET, B_SECRET), start_index=0)
    take_turn(state, A_SECRET)

    assert [p.name for p in state.players] == ["A", "B"]
    assert state.turn_index == 0
    assert state.guesses_taken == 0
    assert state.completed == ()


def test_turn_pointer_cycles_on_misses(scripted_shuffle):
    state = new_match(["A", "B", "C"], scripted_shuffle(A_SECRET, B_SECRET, C_SECRET), start_index=1)
    order = []
    for _ in range(5):
        order.append(state.current_player.name)
        state = take_turn(state, MISS).state

    assert order == ["B", "C", "A", "B", "C"]


def test_round_advances_after_every_player_has_guessed(scripted_shuffle):
    state = new_match(["A", "B", "C"], scripted_shuffle(A_SECRET, B_SECRET, C_SECRET), start_index=0)
    rounds = []
    for _ in range(7):
        result = take_turn(state, MISS)
        rounds.append(result.feedback.round_number)
        state = result.state

    assert rounds == [1, 1, 1, 2, 2, 2, 3]
    assert state.guesses_taken == 7


def test_removing_last_seat_wraps_pointer(scripted_shuffle):
    state = new_match(["A", "B", "C"], scripted_shuffle(A_SECRET, B_SECRET, C_SECRET), start_index=2)

    state = take_turn(state, C_SECRET).state

    assert [p.name for p in state.players] == ["A", "B"]
    assert 0 <= state.turn_index < len(state.players)
    assert state.current_player.name == "A"


def test_removing_middle_seat_hands_turn_to_next(scripted_shuffle):
    state = new_match(["A", "B", "C"], scripted_shuffle(A_SECRET, B_SECRET, C_SECRET), start_index=1)

    state = take_turn(state, B_SECRET).state

    assert [p.name for p in state.players] == ["A", "C"]
    assert state.current_player.name == "C"


def test_round_boundary_uses_roster_size_at_guess_time(scripted_shuffle):
    state = new_match(["A", "B"], scripted_shuffle(A_SECRET, B_SECRET), start_index=0, require_final_guess=True)
    state = take_turn(state, MISS).state
    # second guess of round 1 is a win; round still closes on 2 % 2 == 0
    result = take_turn(state, B_SECRET)

    assert result.feedback.round_number == 1
    assert result.state.round_number == 2


def test_same_round_winners_tie(scripted_shuffle):
    state = new_match(["A", "B", "C"], scripted_shuffle(A_SECRET, B_SECRET, C_SECRET), start_index=0)

    first = take_turn(state, A_SECRET)
    second = take_turn(first.state, B_SECRET)

    assert first.feedback.rank == 1
    assert second.feedback.round_number == 1
    assert second.feedback.rank == 1
    # C was the last one standing and takes the next distinct rank
    assert [(p.name, p.rank) for p in standings(second.state)] == [("A", 1), ("B", 1), ("C", 2)]


def test_later_round_winner_gets_next_rank(scripted_shuffle):
    state = new_match(["A", "B", "C"], scripted_shuffle(A_SECRET, B_SECRET, C_SECRET), start_index=0)
    state = take_turn(state, A_SECRET).state   # A, round 1 -> rank 1
    state = take_turn(state, MISS).state       # B misses, round ends (2 % 2)
    state = take_turn(state, MISS).state       # C misses
    result = take_turn(state, B_SECRET)        # B, round 2

    assert result.feedback.round_number == 2
    assert result.feedback.rank == 2
    assert [(p.name, p.rank) for p in result.finished] == [("B", 2), ("C", 3)]


def test_require_final_guess_makes_last_player_play(scripted_shuffle):
    state = new_match(["A", "B"], scripted_shuffle(A_SECRET, B_SECRET), start_index=0, require_final_guess=True)

    result = take_turn(state, A_SECRET)
    assert [p.name for p in result.finished] == ["A"]
    assert [p.name for p in result.state.players] == ["B"]

    state = take_turn(result.state, MISS).state
    assert state.current_player.name == "B"

    result = take_turn(state, B_SECRET)
    assert result.feedback.rank == 2
    assert is_complete(result.state)


def test_single_player_match_finishes_at_once(scripted_shuffle):
    state = new_match(["Solo"], scripted_shuffle(A_SECRET), start_index=0)

    assert is_complete(state)
    assert state.guesses_taken == 0
    assert [(p.name, p.rank) for p in standings(state)] == [("Solo", 1)]


def test_single_player_must_crack_their_code_when_final_guess_required(scripted_shuffle):
    state = new_match(["Solo"], scripted_shuffle(A_SECRET), start_index=0, require_final_guess=True)

    state = take_turn(state, MISS).state
    assert not is_complete(state)
    assert state.round_number == 2

    result = take_turn(state, A_SECRET)
    assert result.feedback.rank == 1
    assert is_complete(result.state)


def test_no_guesses_after_match_complete(scripted_shuffle):
    state = new_match(["A", "B"], scripted_shuffle(A_SECRET, B_SECRET), start_index=0)
    state = take_turn(state, A_SECRET).state
    assert is_complete(state)

    with pytest.raises(MatchComplete):
        take_turn(state, A_SECRET)


def test_random_start_uses_shuffle(scripted_shuffle):
    shuffle = scripted_shuffle(A_SECRET, B_SECRET, C_SECRET)

    state = new_match(["A", "B", "C"], shuffle)

    # scripted shuffle returns 0..n-1 once the secrets are dealt
    assert state.current_player.name == "A"
    assert [p.secret for p in state.players] == [A_SECRET, B_SECRET, C_SECRET]


def test_new_match_rejects_bad_setup(scripted_shuffle):
    with pytest.raises(SetupError):
        new_match(["A", "A"], scripted_shuffle())
    with pytest.raises(IndexError):
        new_match(["A", "B"], scripted_shuffle(), start_index=2)


def test_standings_sort_unranked_last():
    state = MatchState(
        players=(),
        completed=(
            Player("late", [1, 2, 3, 4], rank=3),
            Player("odd", [5, 6, 7, 8], rank=None),
            Player("first", [0, 1, 2, 3], rank=1),
        ),
    )

    assert [p.name for p in standings(state)] == ["first", "late", "odd"]


def test_restart_keeps_roster_and_clears_ranks(scripted_shuffle):
    state = new_match(["A", "B", "C"], scripted_shuffle(A_SECRET, B_SECRET, C_SECRET), start_index=1)
    state = take_turn(state, B_SECRET).state
    state = take_turn(state, C_SECRET).state
    assert is_complete(state)

    restarted = restart_match(state, scripted_shuffle(C_SECRET, A_SECRET, B_SECRET), start_index=0)

    assert [p.name for p in restarted.players] == ["A", "B", "C"]
    assert [p.secret for p in restarted.players] == [C_SECRET, A_SECRET, B_SECRET]
    assert all(p.rank is None for p in restarted.players)
    assert restarted.completed == ()
    assert restarted.round_number == 1
    assert restarted.guesses_taken == 0
