from __future__ import annotations
import logging
import random
from typing import Dict, List, Optional

from ..dictionary import DictionaryService
from ..game_logic import MIN_WORD_LEN, Verdict, earns_streak_bonus, random_start_letter, validate_word
from ..normalizer import first_letter
from ..schemas import GameMode, GameState, StateSnapshot, SubmissionEntry, SubmitResult
from .store import SessionStore, UserRegistry
from .timer import Clock, TurnClock, now_ms

logger = logging.getLogger(__name__)

TURN_SECONDS_DEFAULT = 20
TURN_SECONDS_MIN = 5
TURN_SECONDS_MAX = 60


class Game:
    def __init__(self, session_id: str, mode: GameMode, turn_seconds: int, letter: str, now: int):
        self.id = f"g_{session_id}_{now}"
        self.session_id = session_id
        self.mode = mode
        self.round = 1
        self.current_letter = letter
        self.clock = TurnClock(turn_seconds)
        self.clock.restart(now)
        self.current_player_id: Optional[str] = None
        self.players: List[str] = []
        self.scores: Dict[str, int] = {}
        self.history: List[SubmissionEntry] = []

    def add_player(self, user_id: str):
        if user_id not in self.players:
            self.players.append(user_id)
        self.scores.setdefault(user_id, 0)

    def next_player(self) -> Optional[str]:
        if not self.players:
            return None
        try:
            idx = self.players.index(self.current_player_id)
        except ValueError:
            idx = -1
        return self.players[(idx + 1) % len(self.players)]

    def to_state(self) -> GameState:
        return GameState(
            id=self.id,
            chatId=self.session_id,
            mode=self.mode,
            round=self.round,
            currentLetter=self.current_letter,
            turnSeconds=self.clock.turn_seconds,
            startedAt=self.clock.started_at,
            expiresAt=self.clock.expires_at,
            currentPlayerId=self.current_player_id,
            players=list(self.players),
            scores=dict(self.scores),
            history=list(self.history),
        )


class GameEngine:
    """Owns every session's game, its used words and the user registry.

    All mutations of one session happen under that session's lock; different
    sessions never contend. Results are pydantic snapshots, never the live
    objects.
    """

    def __init__(self, dictionary: DictionaryService, store: Optional[SessionStore] = None,
                 users: Optional[UserRegistry] = None, clock: Clock = now_ms,
                 rng: Optional[random.Random] = None,
                 turn_seconds_default: int = TURN_SECONDS_DEFAULT,
                 turn_seconds_min: int = TURN_SECONDS_MIN,
                 turn_seconds_max: int = TURN_SECONDS_MAX,
                 min_word_len: int = MIN_WORD_LEN):
        self.dictionary = dictionary
        self.store = store if store is not None else SessionStore()
        self.users = users if users is not None else UserRegistry()
        self.clock = clock
        self.rng = rng or random.Random()
        self.turn_seconds_default = turn_seconds_default
        self.turn_seconds_min = turn_seconds_min
        self.turn_seconds_max = turn_seconds_max
        self.min_word_len = min_word_len

    # -- lifecycle ---------------------------------------------------------

    def clamp_turn_seconds(self, turn_seconds: Optional[int]) -> int:
        if not turn_seconds:
            turn_seconds = self.turn_seconds_default
        return max(self.turn_seconds_min, min(self.turn_seconds_max, int(turn_seconds)))

    def _create(self, session_id: str, mode: GameMode = 'team', turn_seconds: Optional[int] = None,
                starter_letter: Optional[str] = None) -> Game:
        letter = first_letter(starter_letter) or random_start_letter(self.rng)
        return Game(session_id, mode, self.clamp_turn_seconds(turn_seconds), letter, self.clock())

    def _game(self, session_id: str) -> Game:
        return self.store.get_or_create(session_id, lambda: self._create(session_id))

    def new_game(self, session_id: str, mode: GameMode = 'team', turn_seconds: Optional[int] = None,
                 starter_letter: Optional[str] = None) -> GameState:
        with self.store.lock(session_id):
            game = self.store.replace(session_id, self._create(session_id, mode, turn_seconds, starter_letter))
            logger.info("New %s game %s letter=%s turn=%ss", game.mode, game.id,
                        game.current_letter, game.clock.turn_seconds)
            return game.to_state()

    def join(self, session_id: str, user_id: str, display_name: Optional[str] = None) -> GameState:
        with self.store.lock(session_id):
            game = self._game(session_id)
            self._join(game, user_id, display_name)
            return game.to_state()

    def _join(self, game: Game, user_id: str, display_name: Optional[str] = None):
        self.users.ensure(user_id, display_name)
        if user_id not in game.players:
            logger.info("Player %s joined game %s", user_id, game.id)
        game.add_player(user_id)
        if not game.current_player_id:
            game.current_player_id = user_id
            game.clock.restart(self.clock())

    def advance_turn(self, game: Game, forced_next_player: Optional[str] = None):
        if not game.players:
            return
        if forced_next_player not in game.players:
            forced_next_player = None
        game.current_player_id = forced_next_player or game.next_player()
        game.round += 1
        game.clock.restart(self.clock())

    # -- play --------------------------------------------------------------

    def validate_word(self, game: Game, word) -> Verdict:
        used = self.store.used_words(game.session_id)
        return validate_word(word, game.current_letter, self.dictionary, used, self.min_word_len)

    def submit(self, session_id: str, user_id: str, word: str) -> SubmitResult:
        with self.store.lock(session_id):
            game = self._game(session_id)
            now = self.clock()

            if game.clock.expired(now):
                logger.debug("Turn %d of %s expired before %s submitted", game.round, game.id, user_id)
                self.advance_turn(game)
                return SubmitResult(outcome='timeout')
            if game.current_player_id and game.current_player_id != user_id:
                return SubmitResult(outcome='not_your_turn')
            if not game.current_player_id:
                # Nobody holds the turn yet: the first submitter takes it
                self._join(game, user_id)

            verdict = self.validate_word(game, word)
            entry = SubmissionEntry(
                userId=user_id,
                word=word,
                normalized=verdict.normalized,
                valid=verdict.ok,
                score=verdict.score,
                nextLetter=verdict.next_letter if verdict.ok else game.current_letter,
                ts=now,
            )

            if not verdict.ok:
                game.history.append(entry)
                logger.debug("Rejected %r from %s in %s: %s", word, user_id, game.id, verdict.reason.value)
                self.advance_turn(game)
                return SubmitResult(outcome='rejected', reason=verdict.reason,
                                    game=game.to_state(), entry=entry)

            if game.mode == 'solo' and earns_streak_bonus([*game.history, entry], user_id):
                entry = entry.model_copy(update={'bonus': 1})
            game.history.append(entry)

            self.store.used_words(session_id).add(verdict.normalized)
            game.scores[user_id] = game.scores.get(user_id, 0) + entry.score + entry.bonus
            self.users.set_score(user_id, game.scores[user_id])
            game.current_letter = verdict.next_letter
            logger.debug("Accepted %r from %s in %s (+%d, bonus %d)", verdict.normalized, user_id,
                         game.id, entry.score, entry.bonus)

            self.advance_turn(game)
            return SubmitResult(outcome='accepted', ok=True, game=game.to_state(), entry=entry)

    # -- queries -----------------------------------------------------------

    def state(self, session_id: str) -> StateSnapshot:
        with self.store.lock(session_id):
            game = self.store.peek(session_id)
            return StateSnapshot(
                game=game.to_state() if game else None,
                users=self.users.all(),
                now=self.clock(),
            )
