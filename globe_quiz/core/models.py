from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

ALL = "All"

QuestionCount = Union[int, str]


class QuizMode(str, Enum):
    """Available quiz modes."""

    COUNTRY = "country"
    CAPITAL = "capital"
    FLAG = "flag"

    @property
    def display_name(self) -> str:
        mapping = {
            QuizMode.COUNTRY: "Country",
            QuizMode.CAPITAL: "Capital",
            QuizMode.FLAG: "Flag",
        }
        return mapping[self]


class Continent(str, Enum):
    """Continent labels that make up a region selection."""

    AFRICA = "Africa"
    ASIA = "Asia"
    EUROPE = "Europe"
    NORTH_AMERICA = "North America"
    OCEANIA = "Oceania"
    SOUTH_AMERICA = "South America"


class Geography(str, Enum):
    """Named groupings an achievement can be earned for."""

    AFRICA = "Africa"
    ASIA = "Asia"
    EUROPE = "Europe"
    NORTH_AMERICA = "North America"
    OCEANIA = "Oceania"
    SOUTH_AMERICA = "South America"
    WORLD = "World"
    AMERICAS = "Americas"
    EURASIA = "Eurasia"


class QuizStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"


class Outcome(str, Enum):
    """Result of a single answer or skip action."""

    CORRECT = "correct"
    INCORRECT = "incorrect"
    SKIPPED = "skipped"
    IGNORED = "ignored"


class VisualState(str, Enum):
    """How the globe should paint one feature."""

    CORRECT = "answered-correct"
    WRONG = "answered-wrong"
    HOVERED = "hovered"
    DEFAULT = "default"


@dataclass(frozen=True)
class CountryFeature:
    """A quizzable country loaded from the GeoJSON source."""

    id: str
    name: str
    continent: str
    iso_a2: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None


@dataclass(frozen=True)
class AchievementKey:
    """A (mode, geography) pair, stored as ``"country:Europe"``."""

    mode: QuizMode
    geography: Geography

    def __str__(self) -> str:
        return f"{self.mode.value}:{self.geography.value}"

    @classmethod
    def parse(cls, raw: str) -> "AchievementKey":
        mode, sep, geo = str(raw).partition(":")
        if not sep:
            raise ValueError(f"Malformed achievement key: {raw!r}")
        return cls(mode=QuizMode(mode), geography=Geography(geo))


@dataclass(frozen=True)
class SessionSummary:
    """Finished-session record handed to the profile store."""

    created_at: float
    mode: QuizMode
    regions: Tuple[str, ...]
    count: int
    correct: int
    errors: int
    skipped: int
    duration_ms: int

    def to_dict(self) -> dict:
        return {
            "created_at": self.created_at,
            "mode": self.mode.value,
            "regions": list(self.regions),
            "count": self.count,
            "correct": self.correct,
            "errors": self.errors,
            "skipped": self.skipped,
            "duration_ms": self.duration_ms,
        }


@dataclass
class QuizState:
    """Mutable session state for the quiz."""

    mode: QuizMode = QuizMode.COUNTRY
    regions: List[str] = field(default_factory=list)
    max_count: QuestionCount = 10
    features: List[CountryFeature] = field(default_factory=list)
    filtered: List[CountryFeature] = field(default_factory=list)
    quiz: Tuple[CountryFeature, ...] = ()
    status: QuizStatus = QuizStatus.IDLE
    index: int = 0
    correct: set[str] = field(default_factory=set)
    wrong: set[str] = field(default_factory=set)
    hovered: Optional[str] = None
    errors: int = 0
    skipped: int = 0
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    settled: bool = False
    # Selection the current run was started with.
    run_mode: Optional[QuizMode] = None
    run_regions: Tuple[str, ...] = ()
    run_max_count: Optional[QuestionCount] = None
