from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .dictionary import DEFAULT_WORDS_FILE

logger = logging.getLogger(__name__)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, '').strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("%s=%r is not an integer, using %d", name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    host: str = '0.0.0.0'
    port: int = 8080
    bot_token: str = ''
    webapp_url: str = ''
    public_dir: Path = Path('public')
    words_file: Path = DEFAULT_WORDS_FILE
    turn_seconds_default: int = 20
    turn_seconds_min: int = 5
    turn_seconds_max: int = 60
    min_word_len: int = 3
    log_level: str = 'INFO'

    @property
    def resolved_webapp_url(self) -> str:
        return self.webapp_url or f"http://127.0.0.1:{self.port}/public/index.html"

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> 'Settings':
        load_dotenv(dotenv_path)
        settings = cls(
            host=os.getenv('HOST', '0.0.0.0'),
            port=_int_env('PORT', 8080),
            bot_token=os.getenv('BOT_TOKEN', '').strip(),
            webapp_url=os.getenv('WEBAPP_URL', '').strip(),
            public_dir=Path(os.getenv('PUBLIC_DIR', 'public')),
            words_file=Path(os.getenv('WORDS_FILE') or DEFAULT_WORDS_FILE),
            turn_seconds_default=_int_env('TURN_SECONDS_DEFAULT', 20),
            turn_seconds_min=_int_env('TURN_SECONDS_MIN', 5),
            turn_seconds_max=_int_env('TURN_SECONDS_MAX', 60),
            min_word_len=_int_env('MIN_WORD_LEN', 3),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        )
        if not settings.bot_token:
            logger.warning("BOT_TOKEN is empty; the Telegram bot will not start.")
        return settings


def configure_logging(level: str = 'INFO'):
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
