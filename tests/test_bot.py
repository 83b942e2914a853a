import asyncio
from types import SimpleNamespace

import pytest

from wordchain import messages
from wordchain.bot import WordChainBot, display_name

CHAT_ID = -1001


class FakeMessage:
    def __init__(self, text=''):
        self.text = text
        self.replies = []

    async def reply_text(self, text, **kwargs):
        self.replies.append((text, kwargs))


def make_update(text='', user_id=7, first_name='Sara', last_name=None, username=None):
    user = SimpleNamespace(id=user_id, first_name=first_name, last_name=last_name, username=username)
    return SimpleNamespace(
        effective_chat=SimpleNamespace(id=CHAT_ID),
        effective_user=user,
        effective_message=FakeMessage(text),
    )


def run(coro):
    return asyncio.run(coro)


@pytest.fixture()
def changes():
    return []


@pytest.fixture()
def bot(engine, changes):
    async def on_change(session_id, game):
        changes.append((session_id, game))
    return WordChainBot(engine, 'https://example.org/public/index.html', on_change)


def replies(update):
    return [text for text, _ in update.effective_message.replies]


def test_display_name_fallbacks():
    assert display_name(SimpleNamespace(id=1, first_name='Ali', last_name='Rezaei', username='ali')) == 'Ali Rezaei'
    assert display_name(SimpleNamespace(id=1, first_name=None, last_name=None, username='ali')) == 'ali'
    assert display_name(SimpleNamespace(id=1, first_name='', last_name='', username=None)) == 'کاربر 1'


def test_start_sends_webapp_button_and_joins(bot, engine):
    update = make_update('/start')
    run(bot.start(update, None))
    (welcome, kwargs), (hint, _) = update.effective_message.replies
    assert welcome == messages.WELCOME
    assert hint == messages.QUICK_START
    button = kwargs['reply_markup'].inline_keyboard[0][0]
    assert button.web_app.url == f'https://example.org/public/index.html?chatId={CHAT_ID}'
    assert engine.state(str(CHAT_ID)).game.players == ['7']


def test_new_and_join(bot, engine, changes):
    run(bot.new_game(make_update('/new'), None))
    update = make_update('/join', first_name='Sara', last_name='Ahmadi')
    run(bot.join(update, None))
    assert replies(update) == [messages.joined('Sara Ahmadi')]
    game = engine.state(str(CHAT_ID)).game
    assert game.turnSeconds == 20
    assert game.players == ['7']
    assert engine.users.get('7').name == 'Sara Ahmadi'
    assert [s for s, _ in changes] == [str(CHAT_ID)] * 2


def test_word_submission_replies(bot, engine, changes):
    engine.new_game(str(CHAT_ID), starter_letter='ک')
    run(bot.join(make_update('/join'), None))

    update = make_update('کتاب')
    run(bot.word(update, None))
    assert replies(update) == ['درست! +1 امتیاز\nحرف بعد: ب\nنوبت بازیکن بعدی.']

    update = make_update('کتاب')
    run(bot.word(update, None))
    assert replies(update) == ['نادرست: باید با «ب» شروع شود']
    assert len(changes) == 3


def test_other_players_get_turn_error(bot, engine, changes):
    engine.new_game(str(CHAT_ID), starter_letter='ک')
    run(bot.join(make_update('/join', user_id=1), None))
    update = make_update('کتاب', user_id=2)
    run(bot.word(update, None))
    assert replies(update) == [messages.NOT_YOUR_TURN]
    assert len(changes) == 1


def test_non_persian_text_is_ignored(bot, engine):
    update = make_update('hello there')
    run(bot.word(update, None))
    assert replies(update) == []
    assert engine.state(str(CHAT_ID)).game is None


def test_state_reply(bot, engine, clock):
    engine.new_game(str(CHAT_ID), starter_letter='ک')
    engine.join(str(CHAT_ID), '7')
    clock.advance(5)
    update = make_update('/state')
    run(bot.state(update, None))
    assert replies(update) == ['حرف: ک\nنوبت: 7\nزمان: 15s']


def test_state_reply_without_game(bot):
    update = make_update('/state')
    run(bot.state(update, None))
    assert replies(update) == ['حرف: —\nنوبت: —\nزمان: 0s']


def test_callback_is_acknowledged(bot):
    answered = []

    async def answer(text=None, **kwargs):
        answered.append(text)

    update = SimpleNamespace(callback_query=SimpleNamespace(answer=answer))
    run(bot.callback(update, None))
    assert answered == [messages.CALLBACK_ACK]


def test_build_application_registers_handlers(bot):
    application = bot.build_application('123456:TEST-TOKEN')
    handlers = application.handlers[0]
    assert len(handlers) == 6
