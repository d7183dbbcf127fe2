# This file contains shared dependencies used across different routers.

from typing import Optional

from fastapi import Cookie, Header, Request

from core.database import get_db  # noqa: F401  (re-exported for routers)
from services.game_store import GameStore

# The game registry is created once per app (see main.create_app) and injected here.
def get_games(request: Request) -> GameStore:
    return request.app.state.games

# Bearer token from "Authorization: Bearer <token>", falling back to the session_token cookie.
# Returns None when neither is present; the services decide whether that is an error.
def get_session_token(
    authorization: Optional[str] = Header(None),
    session_token: Optional[str] = Cookie(None),
) -> Optional[str]:
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return session_token
