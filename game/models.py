"""Data models for the tongue twister game."""

from typing import List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field


LengthClass = Literal["short", "medium", "long", "custom"]


class Phrase(BaseModel):
    """A target text the player must reproduce by speech."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    difficulty: int = Field(default=2, ge=1, le=3, description="1=easy, 3=hard")
    topic: str = ""
    length: LengthClass = "medium"


class RoundResult(BaseModel):
    """Outcome of one completed (scored or skipped) phrase."""

    model_config = ConfigDict(frozen=True)

    phrase_id: str
    similarity: int = Field(ge=0, le=100)


class SessionSettings(BaseModel):
    """Player choices that produced a session."""

    model_config = ConfigDict(frozen=True)

    topic: str
    length: LengthClass = "medium"
    custom_word_count: Optional[int] = Field(default=None, ge=5, le=40)
    rounds: int = Field(default=5, ge=1)


class Session(BaseModel):
    """One full play-through across a fixed ordered list of phrases.

    Sessions are values: every transition in ``game.session`` returns a new
    instance and leaves the original untouched.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    phrases: Tuple[Phrase, ...] = ()
    current_index: int = Field(default=0, ge=0)
    start_timestamp: int = Field(description="Epoch milliseconds at creation")
    round_results: Tuple[RoundResult, ...] = ()
    settings: Optional[SessionSettings] = None


class MatchVerdict(BaseModel):
    """Scored comparison between a spoken transcript and a phrase's text."""

    model_config = ConfigDict(frozen=True)

    is_match: bool
    similarity: int = Field(ge=0, le=100)
    per_word_match: List[bool] = Field(default_factory=list)
    attempted_word_count: int = 0


class FinalResult(BaseModel):
    """Summary persisted once a session completes."""

    model_config = ConfigDict(frozen=True)

    accuracy: int = Field(ge=0, le=100)
    elapsed_time_ms: int = Field(ge=0)
