from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import schemas
from dependencies import get_db, get_games
from services import card_service
from services.game_store import GameStore

router = APIRouter()


@router.post("/start", response_model=schemas.StartGameResponse)
def start_game(req: schemas.StartGameRequest, db: Session = Depends(get_db), games: GameStore = Depends(get_games)):
    # Deck is read before touching the registry; the registry lock never spans a db call.
    deck = card_service.approved_deck(db, req.category)
    return games.start(req.category.value, deck)


@router.post("/{game_id}/next", response_model=schemas.NextCardResponse)
def next_card(game_id: str, games: GameStore = Depends(get_games)):
    return games.next(game_id)


@router.post("/{game_id}/reset", response_model=schemas.NextCardResponse)
def reset_game(game_id: str, games: GameStore = Depends(get_games)):
    return games.reset(game_id)


@router.delete("/{game_id}", response_model=schemas.OkResponse)
def end_game(game_id: str, games: GameStore = Depends(get_games)):
    games.end(game_id)
    return schemas.OkResponse()
