from __future__ import annotations

import asyncio
import logging
import uuid
from collections import defaultdict
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from tictactoe.config import Settings
from tictactoe.controller import GameController
from tictactoe.engine import GameMode
from tictactoe.scheduler import TurnScheduler

logger = logging.getLogger(__name__)


class CreateSessionRequest(BaseModel):
    mode: Optional[GameMode] = None


class CellRequest(BaseModel):
    index: int = Field(ge=0, le=8)


class ModeRequest(BaseModel):
    mode: GameMode


class SessionResponse(BaseModel):
    id: str
    accepted: bool = True
    state: Dict


@dataclass
class Session:
    id: str
    controller: GameController
    scheduler: TurnScheduler


class Hub:
    def __init__(self) -> None:
        self.connections: Dict[str, Set[WebSocket]] = defaultdict(set)
        self._lock = asyncio.Lock()

    async def connect(self, session_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self.connections[session_id].add(websocket)

    async def disconnect(self, session_id: str, websocket: WebSocket) -> None:
        async with self._lock:
            self.connections[session_id].discard(websocket)

    async def broadcast(self, session_id: str, payload: Dict) -> None:
        async with self._lock:
            recipients = list(self.connections.get(session_id, set()))
        for ws in recipients:
            try:
                await ws.send_json(payload)
            except WebSocketDisconnect:
                await self.disconnect(session_id, ws)
            except RuntimeError:
                logger.debug("Dropping closed websocket for session %s", session_id)
                await self.disconnect(session_id, ws)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    hub = Hub()
    sessions: Dict[str, Session] = {}

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        for session in sessions.values():
            session.scheduler.cancel()

    app = FastAPI(title="Tic-Tac-Toe API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def require_session(session_id: str) -> Session:
        session = sessions.get(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail="Session not found")
        return session

    def respond(session: Session, accepted: bool = True) -> SessionResponse:
        payload = session.controller.snapshot()
        asyncio.create_task(hub.broadcast(session.id, payload))
        return SessionResponse(id=session.id, accepted=accepted, state=payload)

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/session", response_model=SessionResponse)
    async def create_session(req: CreateSessionRequest) -> SessionResponse:
        session_id = uuid.uuid4().hex[:8]
        controller = GameController(settings=settings, mode=req.mode)

        async def push(payload: Dict) -> None:
            await hub.broadcast(session_id, payload)

        session = Session(
            id=session_id,
            controller=controller,
            scheduler=TurnScheduler(controller, on_change=push),
        )
        sessions[session_id] = session
        session.scheduler.sync()
        logger.info("Session %s created (mode=%s)", session_id, controller.state.mode.value)
        return respond(session)

    @app.get("/session/{session_id}", response_model=SessionResponse)
    async def get_session(session_id: str) -> SessionResponse:
        session = require_session(session_id)
        return SessionResponse(id=session.id, state=session.controller.snapshot())

    @app.post("/session/{session_id}/cell", response_model=SessionResponse)
    async def select_cell(session_id: str, body: CellRequest) -> SessionResponse:
        session = require_session(session_id)
        accepted = session.controller.select_cell(body.index)
        if accepted:
            session.scheduler.sync()
        return respond(session, accepted)

    @app.post("/session/{session_id}/new-round", response_model=SessionResponse)
    async def new_round(session_id: str) -> SessionResponse:
        session = require_session(session_id)
        session.controller.new_round()
        session.scheduler.sync()
        return respond(session)

    @app.post("/session/{session_id}/reset-scores", response_model=SessionResponse)
    async def reset_scores(session_id: str) -> SessionResponse:
        session = require_session(session_id)
        session.controller.reset_scores()
        session.scheduler.sync()
        return respond(session)

    @app.post("/session/{session_id}/mode", response_model=SessionResponse)
    async def set_mode(session_id: str, body: ModeRequest) -> SessionResponse:
        session = require_session(session_id)
        accepted = session.controller.set_mode(body.mode)
        if accepted:
            session.scheduler.sync()
        return respond(session, accepted)

    @app.post("/session/{session_id}/ai-step", response_model=SessionResponse)
    async def step_ai(session_id: str) -> SessionResponse:
        session = require_session(session_id)
        if not session.controller.ai_pending:
            raise HTTPException(status_code=400, detail="No AI move is pending")
        session.controller.play_ai_move()
        session.scheduler.sync()
        return respond(session)

    @app.websocket("/ws/session/{session_id}")
    async def ws_session(websocket: WebSocket, session_id: str) -> None:
        await hub.connect(session_id, websocket)
        try:
            session = sessions.get(session_id)
            if session:
                await websocket.send_json(session.controller.snapshot())
            while True:
                # Inbound messages are ignored; actions go through the HTTP routes.
                await websocket.receive_text()
        except WebSocketDisconnect:
            await hub.disconnect(session_id, websocket)

    return app
