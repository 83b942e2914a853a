from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import Optional

import socketio
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .bot import WordChainBot, start_polling, stop_polling
from .config import Settings, configure_logging
from .dictionary import DictionaryService
from .managers.game import GameEngine
from .managers.store import SessionStore, UserRegistry
from .realtime import Broadcaster, register_events
from .routers.api import router as api_router

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> GameEngine:
    return GameEngine(
        DictionaryService.from_file(settings.words_file),
        store=SessionStore(),
        users=UserRegistry(),
        turn_seconds_default=settings.turn_seconds_default,
        turn_seconds_min=settings.turn_seconds_min,
        turn_seconds_max=settings.turn_seconds_max,
        min_word_len=settings.min_word_len,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("Server on http://%s:%s", settings.host, settings.port)
    logger.info("WebApp URL: %s", settings.resolved_webapp_url)
    telegram_app = None
    if settings.bot_token:
        bot = WordChainBot(app.state.engine, settings.resolved_webapp_url, app.state.broadcaster.game_state)
        telegram_app = bot.build_application(settings.bot_token)
        await start_polling(telegram_app)
    try:
        yield
    finally:
        if telegram_app is not None:
            await stop_polling(telegram_app)


def create_app(settings: Optional[Settings] = None, engine: Optional[GameEngine] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="Word-Chain Server", version="0.1.0", lifespan=lifespan)

    # CORS for REST
    app.add_middleware(
        CORSMiddleware,
        allow_origins=['*'],
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    sio = socketio.AsyncServer(async_mode='asgi', cors_allowed_origins='*')
    app.state.settings = settings
    app.state.engine = engine or build_engine(settings)
    app.state.sio = sio
    app.state.broadcaster = Broadcaster(sio)
    register_events(sio, app.state.engine)

    app.include_router(api_router)

    public_dir = settings.public_dir

    @app.get('/', include_in_schema=False)
    @app.get('/index.html', include_in_schema=False)
    async def index():
        page = public_dir / 'index.html'
        if not page.is_file():
            return PlainTextResponse('public/index.html پیدا نشد', status_code=404)
        return FileResponse(page, media_type='text/html; charset=utf-8', headers={'Cache-Control': 'no-store'})

    if public_dir.is_dir():
        app.mount('/public', StaticFiles(directory=public_dir), name='public')

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        error = 'Not found' if exc.status_code == 404 else str(exc.detail)
        return JSONResponse({'ok': False, 'error': error}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def bad_request(request: Request, exc: RequestValidationError):
        return JSONResponse({'ok': False, 'error': 'bad request'}, status_code=400)

    return app


def create_asgi_app(settings: Optional[Settings] = None) -> socketio.ASGIApp:
    """FastAPI app with the Socket.IO server mounted in front of it."""
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    app = create_app(settings)
    return socketio.ASGIApp(app.state.sio, other_asgi_app=app)

# For local running: uvicorn wordchain.main:create_asgi_app --factory --host 0.0.0.0 --port 8080
