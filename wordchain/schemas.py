from __future__ import annotations
from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Dict, List, Literal, Optional, Union

GameMode = Literal['team', 'solo']


class RejectReason(str, Enum):
    TOO_SHORT = 'too_short'
    WRONG_LETTER = 'wrong_letter'
    NOT_IN_DICTIONARY = 'not_in_dictionary'
    ALREADY_USED = 'already_used'


class SubmissionEntry(BaseModel):
    """One submission as recorded in history. Points credited are ``score + bonus``."""

    model_config = ConfigDict(frozen=True)

    userId: str
    word: str
    normalized: str
    valid: bool
    score: int = 0
    bonus: int = 0
    nextLetter: Optional[str] = None
    ts: int


class GameState(BaseModel):
    id: str
    chatId: str
    mode: GameMode = 'team'
    round: int = 1
    currentLetter: str
    turnSeconds: int
    startedAt: int
    expiresAt: int
    currentPlayerId: Optional[str] = None
    players: List[str] = []
    scores: Dict[str, int] = {}
    history: List[SubmissionEntry] = []


class User(BaseModel):
    id: str
    name: str
    score: int = 0


SubmitOutcome = Literal['timeout', 'not_your_turn', 'rejected', 'accepted']


class SubmitResult(BaseModel):
    outcome: SubmitOutcome
    ok: bool = False
    reason: Optional[RejectReason] = None
    game: Optional[GameState] = None
    entry: Optional[SubmissionEntry] = None


class StateSnapshot(BaseModel):
    game: Optional[GameState] = None
    users: List[User] = []
    now: int


# HTTP request bodies. Chat ids from Telegram arrive as integers.
SessionId = Union[str, int]


class NewGameRequest(BaseModel):
    chatId: Optional[SessionId] = None
    mode: GameMode = 'team'
    turnSeconds: Optional[int] = None
    starterLetter: Optional[str] = None


class JoinRequest(BaseModel):
    chatId: Optional[SessionId] = None
    userId: Optional[SessionId] = None
    displayName: Optional[str] = None


class SubmitRequest(BaseModel):
    chatId: Optional[SessionId] = None
    userId: Optional[SessionId] = None
    word: Optional[str] = None
