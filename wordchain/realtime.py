from __future__ import annotations
import logging
from typing import Optional

import socketio

from .managers.game import GameEngine
from .schemas import GameState

logger = logging.getLogger(__name__)


class Broadcaster:
    """Pushes ``game:state`` to the Socket.IO room named after the session id."""

    def __init__(self, sio: socketio.AsyncServer):
        self.sio = sio

    async def game_state(self, session_id: str, game: Optional[GameState]):
        if game is None:
            return
        await self.sio.emit('game:state', game.model_dump(by_alias=True), room=session_id)


def register_events(sio: socketio.AsyncServer, engine: GameEngine):
    @sio.event
    async def connect(sid, environ, auth=None):
        await sio.emit('pong', to=sid)

    @sio.event
    async def disconnect(sid):
        logger.debug("Socket %s disconnected", sid)

    @sio.on('ping')
    async def on_ping(sid):
        await sio.emit('pong', to=sid)

    @sio.on('join-game')
    async def join_game(sid, chat_id):
        session_id = str(chat_id or 'local')
        await sio.enter_room(sid, session_id)
        await sio.save_session(sid, {'chat_id': session_id})
        game = engine.state(session_id).game
        if game:
            await sio.emit('game:state', game.model_dump(by_alias=True), to=sid)

    @sio.on('leave-game')
    async def leave_game(sid, chat_id):
        await sio.leave_room(sid, str(chat_id or 'local'))
