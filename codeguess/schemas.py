"""
Explicit validation & Pydantic models
- Models are used to validate and serialize/deserialize data
  exchanged between the client and server.
- Defines the structure of API requests and responses.
- Secrets only ever appear in StandingsOut, once the match is over.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .types import MAX_PLAYERS, MIN_PLAYERS
from .validation import validate_names


# 1. Validates the setup for a new match
class NewMatchRequest(BaseModel):
    names: List[str] = Field(
        ..., description=f"Player names in seating order ({MIN_PLAYERS} to {MAX_PLAYERS}, unique)"
    )
    start_index: Optional[int] = Field(
        None, description="0-based index of the starting player; omit for a random start"
    )
    require_final_guess: bool = Field(
        False, description="Make the last remaining player guess their code instead of auto-finishing"
    )

    @field_validator("names")
    @classmethod
    def validate_roster(cls, names: List[str]) -> List[str]:
        # SetupError is a ValueError, so pydantic reports it as a 422
        return validate_names(names)

    @model_validator(mode="after")
    def validate_start(self) -> "NewMatchRequest":
        if self.start_index is not None and not (0 <= self.start_index < len(self.names)):
            raise ValueError("start_index must point at one of the players.")
        return self

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"names": ["Ada", "Grace"], "start_index": 0},
                {"names": ["Ada", "Grace", "Linus"]},
            ]
        }
    }


# 2. Raw guess text; parsed by validation.parse_guess in the route
class GuessRequest(BaseModel):
    guess: str = Field(..., description="Four distinct digits, e.g. '0493'")


class RestartRequest(BaseModel):
    start_index: Optional[int] = Field(None, description="0-based starting player; omit for random")


# 3. Describes the feedback for a single guess
class GuessEntryOut(BaseModel):
    player: str = Field(..., description="Who guessed")
    round_number: int = Field(..., description="Round the guess was made in")
    guess: List[int] = Field(..., description="The player's guess")
    total_correct: int = Field(..., description="How many digits are correct (any position)")
    positional_correct: int = Field(..., description="How many digits are in the correct position")
    message: str = Field(..., description="Feedback message")
    timestamp: float = Field(..., description="When the guess was made")


class PlayerOut(BaseModel):
    name: str
    rank: Optional[int] = None


# 4. Represents the overall state of a match (no secrets)
class MatchStateOut(BaseModel):
    match_id: str = Field(..., description="Unique ID for the match")
    status: str = Field(..., description="'in_progress' or 'complete'")
    round_number: int = Field(..., description="Current round, starting at 1")
    guesses_taken: int = Field(..., description="Guesses made by all players so far")
    current_player: Optional[str] = Field(None, description="Whose turn it is")
    active: List[PlayerOut] = Field(..., description="Players still guessing, in turn order")
    completed: List[PlayerOut] = Field(..., description="Ranked players, in finishing order")
    history: List[GuessEntryOut] = Field(..., description="All guesses made so far with feedback")


# 5. Result of a guess
class GuessResponse(BaseModel):
    feedback: Optional[GuessEntryOut] = Field(None, description="Feedback from this guess")
    finished: List[PlayerOut] = Field(default_factory=list, description="Players ranked by this turn")
    state: MatchStateOut
    note: Optional[str] = Field(None, description="Extra note (ex. 'Match complete.')")


class StandingOut(BaseModel):
    name: str
    rank: Optional[int]
    secret: List[int]


# 6. Final standings, secrets revealed
class StandingsOut(BaseModel):
    match_id: str
    standings: List[StandingOut]
