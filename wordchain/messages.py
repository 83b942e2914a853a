"""User-facing Persian texts for engine outcomes.

The engine reports codes only; the HTTP API and the Telegram bot both render
them from the tables below.
"""
from __future__ import annotations
from typing import Optional

from .schemas import RejectReason, StateSnapshot, SubmitResult

TIMEOUT = 'زمان نوبت تمام شد. نوبت بعدی آغاز شد.'
NOT_YOUR_TURN = 'الان نوبت شما نیست.'

REJECT_MESSAGES = {
    RejectReason.TOO_SHORT: 'کلمه خیلی کوتاه است',
    RejectReason.WRONG_LETTER: 'باید با «{letter}» شروع شود',
    RejectReason.NOT_IN_DICTIONARY: 'در فرهنگ لغت نیست',
    RejectReason.ALREADY_USED: 'این کلمه قبلاً استفاده شده',
}

ERROR_CODES = {
    'timeout': ('turn_expired', TIMEOUT),
    'not_your_turn': ('not_your_turn', NOT_YOUR_TURN),
}

WELCOME = 'به «زنجیرواژه» خوش آمدید! دکمه زیر را بزنید تا وب‌اپ باز شود.'
OPEN_WEBAPP = 'بازکردن وب‌اپ'
QUICK_START = 'برای شروع سریع: /new — سپس کلمه بفرستید.'
NEW_GAME_STARTED = 'بازی جدید آغاز شد. با /join بپیوندید یا کلمه بفرستید.'
CALLBACK_ACK = 'باز می‌شویم...'
NO_VALUE = '—'


def reject_message(reason: RejectReason, letter: Optional[str] = None) -> str:
    return REJECT_MESSAGES[reason].format(letter=letter or NO_VALUE)


def joined(name: str) -> str:
    return f"پیوستی، {name}. حرف شروع را با /state ببین."


def describe_result(result: SubmitResult) -> str:
    if result.outcome in ERROR_CODES:
        return ERROR_CODES[result.outcome][1]
    entry = result.entry
    if not result.ok:
        return f"نادرست: {reject_message(result.reason, entry.nextLetter if entry else None)}"
    lines = [f"درست! +{entry.score} امتیاز"]
    if entry.bonus:
        lines.append(f"جایزه زنجیره: +{entry.bonus}")
    lines.append(f"حرف بعد: {entry.nextLetter}")
    lines.append('نوبت بازیکن بعدی.')
    return '\n'.join(lines)


def describe_state(snapshot: StateSnapshot) -> str:
    game = snapshot.game
    letter = game.currentLetter if game else NO_VALUE
    current = (game.currentPlayerId if game else None) or NO_VALUE
    left = max(0, (game.expiresAt - snapshot.now) // 1000) if game else 0
    return f"حرف: {letter}\nنوبت: {current}\nزمان: {left}s"
