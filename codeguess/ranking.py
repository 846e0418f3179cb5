"""
Round-based ranking.

Ranks are handed out per round, not per win: everyone who cracks their
code in the same round shares a rank, and the next round that produces a
winner gets the next rank (dense ranking: 1, 1, 2, 3, 3, ...).
"""

import logging
from dataclasses import dataclass, replace
from typing import Tuple

logger = logging.getLogger("codeguess.ranking")


@dataclass(frozen=True)
class Ranking:
    next_rank: int = 1
    # 0 = nobody ranked yet; rounds start at 1
    last_assigned_round: int = 0

    def award(self, round_number: int) -> Tuple[int, "Ranking"]:
        """
        Returns (rank, updated Ranking) for a win in round_number.
          rounds 1, 1, 2, 3, 3, 3 -> ranks 1, 1, 2, 3, 3, 3
        """
        if round_number > self.last_assigned_round:
            rank = self.next_rank
            updated = replace(self, next_rank=self.next_rank + 1, last_assigned_round=round_number)
            logger.debug("Round %s opens rank %s", round_number, rank)
            return rank, updated

        # Same round as the previous winner: tie, counter stays put
        rank = max(self.next_rank - 1, 1)
        logger.debug("Round %s ties at rank %s", round_number, rank)
        return rank, self

    def award_last(self) -> Tuple[int, "Ranking"]:
        """The last unranked player takes whatever rank is next in line."""
        rank = self.next_rank
        return rank, replace(self, next_rank=self.next_rank + 1)
