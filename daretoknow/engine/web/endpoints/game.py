"""Tournament state endpoints and the game WebSocket."""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request, WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from daretoknow.engine.tournaments import TournamentError, TournamentManager
from daretoknow.engine.web.commands import (
    ERROR,
    MATCH_STATE,
    TOURNAMENT_STATE,
    CommandDispatcher,
)
from daretoknow.engine.web.connection_manager import ConnectionManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")
ws_router = APIRouter()


class JoinRequest(BaseModel):
    code: str


def get_manager(request: Request) -> TournamentManager:
    return request.app.state.manager


@router.get("/health")
async def health_check():
    """Health check endpoint to verify API is running."""
    return {"isAlive": True}


@router.get("/tournament")
async def get_tournament(request: Request):
    tournament = get_manager(request).tournament
    return tournament.snapshot() if tournament else None


@router.get("/match")
async def get_current_match(request: Request):
    match = get_manager(request).current_match()
    return match.snapshot() if match else None


@router.get("/tournament/summary")
async def get_summary(request: Request):
    """Leaderboard for the current tournament."""
    try:
        return get_manager(request).summary().snapshot()
    except TournamentError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/tournament/validation")
async def get_validation(request: Request):
    return get_manager(request).validate_tournament_start().snapshot()


@router.get("/categories")
async def get_categories(request: Request):
    return {"categories": get_manager(request).selector.provider.list_categories()}


@router.post("/join")
async def join_match(join: JoinRequest, request: Request):
    """Check a game code against the active match."""
    return get_manager(request).check_join_code(join.code).snapshot()


@ws_router.websocket("/ws/game")
async def game_websocket(websocket: WebSocket):
    """WebSocket endpoint carrying commands in and state broadcasts out."""
    connections: ConnectionManager = websocket.app.state.connections
    dispatcher: CommandDispatcher = websocket.app.state.dispatcher
    manager: TournamentManager = websocket.app.state.manager

    await websocket.accept()
    connections.add_connection(websocket)

    try:
        tournament = manager.tournament
        match = manager.current_match()
        await websocket.send_json(
            {
                "type": TOURNAMENT_STATE,
                "payload": tournament.snapshot() if tournament else None,
            }
        )
        await websocket.send_json(
            {"type": MATCH_STATE, "payload": match.snapshot() if match else None}
        )

        while True:
            message = await websocket.receive_json()
            replies: list[dict[str, Any]] = []

            def respond(event: str, payload: Any) -> None:
                replies.append({"type": event, "payload": payload})

            if not isinstance(message, dict) or "type" not in message:
                respond(ERROR, "Messages need a 'type' field")
            else:
                try:
                    dispatcher.dispatch(
                        str(message["type"]), message.get("payload"), respond
                    )
                except Exception as e:
                    logger.error(f"Command {message['type']} failed: {e}")
                    respond(ERROR, f"Command failed: {e}")

            for reply in replies:
                await websocket.send_json(reply)
    except WebSocketDisconnect:
        logger.debug("Game WebSocket closed by client")
    finally:
        connections.remove_connection(websocket)
