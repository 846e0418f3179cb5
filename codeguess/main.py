'''
Hot-seat Code Guessing API

All players share one client; the match lives in memory only.

Endpoints:
POST /matches                      -> start a match
GET  /matches/{id}                 -> read state & history
POST /matches/{id}/guess           -> current player submits a guess
GET  /matches/{id}/standings       -> final rankings (secrets revealed)
POST /matches/{id}/restart         -> same players, new secrets

Run with: uvicorn codeguess.main:app
'''

from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .config import load_settings
from .logging_config import setup_logging
from .match import Player, is_complete, standings
from .random_client import make_shuffler
from .schemas import (
    GuessEntryOut,
    GuessRequest,
    GuessResponse,
    MatchStateOut,
    NewMatchRequest,
    PlayerOut,
    RestartRequest,
    StandingOut,
    StandingsOut,
)
from .store import Match, MatchStore
from .validation import GuessError, parse_guess

settings = load_settings()
setup_logging(settings.log_level)

app = FastAPI(title="Code Guessing API", version="1.0.0")

# Allow everything in dev so the docs and front-end work easily
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

_store = MatchStore()


def get_store() -> MatchStore:
    return _store


shuffle = make_shuffler(settings.use_random_org, settings.random_timeout)


def _player_out(player: Player) -> PlayerOut:
    return PlayerOut(name=player.name, rank=player.rank)


def _to_state_out(match: Match) -> MatchStateOut:
    state = match.state
    current = state.current_player
    return MatchStateOut(
        match_id=match.id,
        status="complete" if is_complete(state) else "in_progress",
        round_number=state.round_number,
        guesses_taken=state.guesses_taken,
        current_player=current.name if current else None,
        active=[_player_out(p) for p in state.players],
        completed=[_player_out(p) for p in state.completed],
        history=[GuessEntryOut(**vars(entry)) for entry in match.history],
    )


def _get_or_404(store: MatchStore, match_id: str) -> Match:
    match = store.get(match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")
    return match

# ---------------- Routes ----------------

@app.post("/matches", response_model=MatchStateOut, summary="Start a new match")
def start_match(
    payload: NewMatchRequest,
    store: MatchStore = Depends(get_store),
) -> MatchStateOut:
    match = store.create(
        payload.names,
        shuffle,
        start_index=payload.start_index,
        require_final_guess=payload.require_final_guess or settings.require_final_guess,
    )
    return _to_state_out(match)


@app.get("/matches/{match_id}", response_model=MatchStateOut, summary="Get current match state")
def get_match(
    match_id: str,
    store: MatchStore = Depends(get_store),
) -> MatchStateOut:
    return _to_state_out(_get_or_404(store, match_id))


@app.post("/matches/{match_id}/guess", response_model=GuessResponse, summary="Submit a guess for the current player")
def submit_guess(
    match_id: str,
    payload: GuessRequest,
    store: MatchStore = Depends(get_store),
) -> GuessResponse:
    _get_or_404(store, match_id)

    try:
        code = parse_guess(payload.guess)
    except GuessError as ge:
        raise HTTPException(status_code=400, detail={"reason": ge.reason, "message": str(ge)})

    outcome = store.guess(match_id, code)
    if outcome is None:
        raise HTTPException(status_code=404, detail="Match not found")

    state_out = _to_state_out(outcome.match)
    feedback = state_out.history[-1] if outcome.feedback is not None else None

    note: Optional[str] = None
    if is_complete(outcome.match.state):
        note = "Match complete. No more guesses allowed."

    return GuessResponse(
        feedback=feedback,
        finished=[_player_out(p) for p in outcome.finished],
        state=state_out,
        note=note,
    )


@app.get("/matches/{match_id}/standings", response_model=StandingsOut, summary="Final rankings with secrets")
def get_standings(
    match_id: str,
    store: MatchStore = Depends(get_store),
) -> StandingsOut:
    match = _get_or_404(store, match_id)
    if not is_complete(match.state):
        raise HTTPException(status_code=409, detail="Match still in progress. Standings are not final.")
    return StandingsOut(
        match_id=match.id,
        standings=[
            StandingOut(name=p.name, rank=p.rank, secret=list(p.secret))
            for p in standings(match.state)
        ],
    )


@app.post("/matches/{match_id}/restart", response_model=MatchStateOut, summary="Restart with the same players")
def restart(
    match_id: str,
    payload: Optional[RestartRequest] = None,
    store: MatchStore = Depends(get_store),
) -> MatchStateOut:
    match = _get_or_404(store, match_id)
    start_index = payload.start_index if payload else None
    if start_index is not None and not (0 <= start_index < len(match.state.seating)):
        raise HTTPException(status_code=400, detail="start_index must point at one of the players.")
    restarted = store.restart(match_id, shuffle, start_index=start_index)
    return _to_state_out(restarted)
