from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..managers.game import GameEngine
from ..messages import ERROR_CODES, reject_message
from ..realtime import Broadcaster
from ..schemas import JoinRequest, NewGameRequest, SubmitRequest

router = APIRouter(prefix='/api')

DEFAULT_SESSION = 'local'


def get_engine(request: Request) -> GameEngine:
    return request.app.state.engine


def get_broadcaster(request: Request) -> Broadcaster:
    return request.app.state.broadcaster


def _session(chat_id) -> str:
    return str(chat_id or DEFAULT_SESSION)


def _text(value) -> str:
    return str(value if value is not None else '').strip()


def bad_request(error: str) -> JSONResponse:
    return JSONResponse({'ok': False, 'error': error}, status_code=400)


@router.post('/newgame')
async def new_game(body: Optional[NewGameRequest] = None,
                   engine: GameEngine = Depends(get_engine),
                   broadcaster: Broadcaster = Depends(get_broadcaster)):
    body = body or NewGameRequest()
    session_id = _session(body.chatId)
    game = engine.new_game(session_id, mode=body.mode, turn_seconds=body.turnSeconds,
                           starter_letter=body.starterLetter)
    await broadcaster.game_state(session_id, game)
    return {'ok': True, 'game': game.model_dump(by_alias=True)}


@router.post('/join')
async def join(body: Optional[JoinRequest] = None,
               engine: GameEngine = Depends(get_engine),
               broadcaster: Broadcaster = Depends(get_broadcaster)):
    body = body or JoinRequest()
    session_id = _session(body.chatId)
    user_id = _text(body.userId)
    if not user_id:
        return bad_request('userId لازم است')
    game = engine.join(session_id, user_id, _text(body.displayName) or None)
    await broadcaster.game_state(session_id, game)
    user = engine.users.get(user_id)
    return {
        'ok': True,
        'game': game.model_dump(by_alias=True),
        'user': user.model_dump(by_alias=True) if user else None,
    }


@router.post('/submit')
async def submit(body: Optional[SubmitRequest] = None,
                 engine: GameEngine = Depends(get_engine),
                 broadcaster: Broadcaster = Depends(get_broadcaster)):
    body = body or SubmitRequest()
    session_id = _session(body.chatId)
    user_id = _text(body.userId)
    word = _text(body.word)
    if not user_id or not word:
        return bad_request('userId و word لازم است')

    result = engine.submit(session_id, user_id, word)
    if result.outcome in ERROR_CODES:
        code, message = ERROR_CODES[result.outcome]
        if result.outcome == 'timeout':
            await broadcaster.game_state(session_id, engine.state(session_id).game)
        return {'ok': False, 'error': message, 'code': code}

    await broadcaster.game_state(session_id, result.game)
    payload = {
        'ok': result.ok,
        'game': result.game.model_dump(by_alias=True),
        'entry': result.entry.model_dump(by_alias=True),
    }
    if not result.ok:
        payload['reason'] = result.reason.value
        payload['message'] = reject_message(result.reason, result.entry.nextLetter)
    return payload


@router.get('/state')
async def state(chatId: Optional[str] = None, engine: GameEngine = Depends(get_engine)):
    snapshot = engine.state(_session(chatId))
    return {'ok': True, **snapshot.model_dump(by_alias=True)}
