"""
Hot-seat console game.

Everything here is I/O glue around codeguess.match: prompts that re-ask
until the validators accept, feedback rendering, pacing between turns so
the next player does not read the previous feedback, the final rankings
table, and the play-again menu.
"""

import argparse
import logging
import time
from typing import Callable, List, Optional, Sequence, Tuple

from .config import load_settings
from .engine import format_code
from .logging_config import setup_logging
from .match import MatchState, Player, is_complete, new_match, restart_match, standings, take_turn
from .random_client import make_shuffler
from .types import MAX_PLAYERS, Code, Shuffler
from .validation import (
    GuessError,
    SetupError,
    parse_guess,
    parse_player_count,
    parse_start_selection,
    validate_names,
)

logger = logging.getLogger("codeguess.console")

CLEAR_SCREEN = "\x1b[2J\x1b[H"
RULE = "=" * 38
THIN_RULE = "-" * 38

CONTINUE = "continue"
RESTART = "restart"
QUIT = "quit"


class Console:
    def __init__(
        self,
        shuffle: Shuffler,
        read: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
        sleep: Callable[[float], None] = time.sleep,
        turn_pause: float = 5.0,
        require_final_guess: bool = False,
        clear: bool = True,
    ) -> None:
        self.shuffle = shuffle
        self.read = read
        self.write = write
        self.sleep = sleep
        self.turn_pause = turn_pause
        self.require_final_guess = require_final_guess
        self.clear = clear

    def clear_screen(self) -> None:
        if self.clear:
            self.write(CLEAR_SCREEN)

    # ---------------- Setup prompts ----------------

    def ask_player_count(self) -> int:
        while True:
            try:
                return parse_player_count(self.read(f"Enter the number of players (1 to {MAX_PLAYERS}): "))
            except SetupError as se:
                self.write(str(se))

    def ask_names(self, count: int) -> List[str]:
        names: List[str] = []
        while len(names) < count:
            name = self.read(f"Enter name for Player {len(names) + 1}: ").strip()
            try:
                validate_names(names + [name])
            except SetupError as se:
                self.write(str(se))
                continue
            names.append(name)
        return names

    def ask_start(self, names: Sequence[str]) -> int:
        while True:
            self.write("\n--- Select Starting Player ---")
            for i, name in enumerate(names):
                self.write(f"  [{i + 1}] {name}")
            self.write("  [0] Random selection")
            try:
                choice = parse_start_selection(self.read("Enter selection (0, 1, 2, ...): "), len(names))
            except SetupError as se:
                self.write(str(se))
                continue

            if choice is None:
                choice = self.shuffle(len(names))[0]
                self.write(f"Randomly selected {names[choice]} to start!")
            else:
                self.write(f"Starting player is {names[choice]}.")
            return choice

    def ask_guess(self, player_name: str) -> Code:
        # Bad input never costs the player their turn
        while True:
            try:
                return parse_guess(self.read(f"{player_name}, enter your 4-digit guess: "))
            except GuessError as ge:
                self.write(str(ge))

    # ---------------- The match ----------------

    def announce_auto_finish(self, player: Player) -> None:
        self.write("\n--- Final Player Ranked ---")
        self.write(f"{player.name} is automatically assigned place {player.rank}.")

    def ask_after_win(self, winner: str, state: MatchState) -> str:
        """
        Menu shown after every correct guess. Returns CONTINUE, RESTART or QUIT.
        """
        while True:
            self.write("\n--- Post-Game Menu ---")
            if is_complete(state):
                self.write(f"[1] Finish Game: Assign {winner} rank and view final menu.")
            else:
                self.write(f"[1] Continue: Remove {winner} and play for next place.")
            self.write("[2] Restart: Start a new game with current players.")
            self.write("[3] Quit: Exit the program.")
            choice = self.read("Enter your choice (1, 2, or 3): ").strip()
            if choice == "1":
                return CONTINUE
            if choice == "2":
                return RESTART
            if choice == "3":
                return QUIT
            self.write("Invalid input. Please enter 1, 2, or 3.")

    def play_match(self, state: MatchState) -> Tuple[MatchState, str]:
        """
        Plays turns until the match is complete or the players stop it from
        the post-win menu. Returns the state and CONTINUE, RESTART or QUIT.
        """
        if is_complete(state) and state.guesses_taken == 0:
            # solo match: the only player was ranked at setup
            for player in state.completed:
                self.announce_auto_finish(player)

        while not is_complete(state):
            player = state.current_player

            self.write("\n" + RULE)
            self.write(f"ROUND {state.round_number} | {player.name}'s Guess")
            self.write(RULE)

            guess = self.ask_guess(player.name)
            result = take_turn(state, guess)
            state = result.state
            feedback = result.feedback

            self.write(THIN_RULE)
            self.write(
                f"Guess {format_code(guess)}: Feedback (D,P) -> "
                f"{feedback.total_correct},{feedback.positional_correct}"
            )
            self.write(THIN_RULE)

            if feedback.won:
                self.write("\n*** CODE GUESSED! ***")
                self.write(
                    f"{feedback.player} correctly guessed their secret code: {format_code(guess)}. "
                    f"They finished in place {feedback.rank}!"
                )
                for other in result.finished[1:]:
                    self.announce_auto_finish(other)

                action = self.ask_after_win(feedback.player, state)
                if action != CONTINUE:
                    return state, action
                self.clear_screen()
                continue

            self.write(f"\n...Moving to next Player in {self.turn_pause:g} seconds...")
            self.sleep(self.turn_pause)
            self.clear_screen()

        self.write("\nAll players have finished the game. Thanks for playing!")
        return state, CONTINUE

    def show_rankings(self, state: MatchState) -> None:
        ranked = standings(state)
        if not ranked:
            return
        self.write("\n" + RULE)
        self.write("|           FINAL RANKINGS           |")
        self.write(RULE)
        for p in ranked:
            rank_str = f"Rank {p.rank}" if p.rank is not None else "Unranked"
            self.write(f"| {p.name:<15} | {rank_str:<8} | Secret: {format_code(p.secret):<4} |")
        self.write(RULE)

    def setup_match(self) -> MatchState:
        self.clear_screen()
        self.write("--- Multiplayer Code Guessing Game (Individual Secrets) ---")
        self.write("Each player has a unique, hidden 4-digit code (non-repeating digits, can start with 0).")
        self.write("Players take turns guessing their own secret. First to guess wins!")

        count = self.ask_player_count()
        names = self.ask_names(count)
        start = self.ask_start(names)
        self.write("\nAll secret codes have been generated. Let the guessing begin!")
        return new_match(names, self.shuffle, start_index=start, require_final_guess=self.require_final_guess)

    def ask_menu(self) -> str:
        while True:
            self.write("\n--- Game Over ---")
            self.write("[1] Restart: New game with the same players")
            self.write("[2] Start a New Game")
            self.write("[3] Quit Program")
            choice = self.read("Enter choice (1, 2, or 3): ").strip()
            if choice in ("1", "2", "3"):
                return choice
            self.write("Invalid input. Please enter 1, 2, or 3.")

    def run(self) -> None:
        state = self.setup_match()
        while True:
            self.clear_screen()
            state, action = self.play_match(state)
            if action == QUIT:
                self.write("Thank you for playing! Goodbye.")
                return

            self.show_rankings(state)
            if action == RESTART:
                choice = "1"
            else:
                choice = self.ask_menu()

            if choice == "3":
                self.write("Thank you for playing! Goodbye.")
                return
            if choice == "1":
                logger.info("Restarting with the same players")
                state = restart_match(state, self.shuffle, start_index=self.ask_start(state.seating))
            else:
                state = self.setup_match()


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = load_settings()

    parser = argparse.ArgumentParser(prog="codeguess", description="Hot-seat multiplayer code guessing game")
    parser.add_argument("--no-pause", action="store_true", help="Do not pause or clear the screen between turns")
    parser.add_argument(
        "--require-final-guess",
        action="store_true",
        default=settings.require_final_guess,
        help="Make the last remaining player guess their code instead of auto-finishing",
    )
    parser.add_argument("--offline", action="store_true", help="Never call random.org; shuffle locally")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level (default: %(default)s)")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    console = Console(
        read=input,
        shuffle=make_shuffler(
            use_random_org=settings.use_random_org and not args.offline,
            timeout=settings.random_timeout,
        ),
        turn_pause=0.0 if args.no_pause else settings.turn_pause,
        require_final_guess=args.require_final_guess,
        clear=not args.no_pause,
    )
    try:
        console.run()
    except (EOFError, KeyboardInterrupt):
        console.write("\nThank you for playing! Goodbye.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
