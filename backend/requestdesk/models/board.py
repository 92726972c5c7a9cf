"""Data models for the board and label configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CaselessName:
    """Trimmed, non-empty name compared case-insensitively.

    Event names and label names are matched this way everywhere, so two
    names that differ only in case or surrounding whitespace are the same key.
    """

    __slots__ = ("value", "key")

    def __init__(self, value: str) -> None:
        if not isinstance(value, str):
            raise ValueError(f"Name must be a string, got {type(value).__name__}")
        stripped = value.strip()
        if not stripped:
            raise ValueError("Name must not be empty")
        self.value = stripped
        self.key = stripped.casefold()

    @classmethod
    def parse(cls, value: object) -> CaselessName | None:
        """Return a name for *value*, or None when it is blank or not a string."""
        if not isinstance(value, str) or not value.strip():
            return None
        return cls(value)

    def matches(self, raw: str | None) -> bool:
        if not isinstance(raw, str):
            return False
        return raw.strip().casefold() == self.key

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CaselessName):
            return self.key == other.key
        if isinstance(other, str):
            return self.matches(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"CaselessName({self.value!r})"


class LabelColor(str, Enum):
    """Label colors accepted by the board service."""

    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"
    PURPLE = "purple"
    BLUE = "blue"
    SKY = "sky"
    LIME = "lime"
    PINK = "pink"
    BLACK = "black"


@dataclass(frozen=True)
class BoardConfig:
    """One configured event and the board that receives its requests."""

    event_name: CaselessName
    board_id: str
    enabled: bool = True


@dataclass(frozen=True)
class LabelSpec:
    """A label every board must carry."""

    name: CaselessName
    color: LabelColor


@dataclass(frozen=True)
class DeskConfig:
    """Immutable board/label configuration loaded at startup."""

    boards: tuple[BoardConfig, ...]
    labels: tuple[LabelSpec, ...]
    default_event: CaselessName | None = None

    @property
    def enabled_boards(self) -> tuple[BoardConfig, ...]:
        return tuple(board for board in self.boards if board.enabled)

    @property
    def event_names(self) -> list[str]:
        """Enabled event names in configuration order."""
        return [board.event_name.value for board in self.enabled_boards]

    def find_board(self, event_name: str | None) -> BoardConfig | None:
        """Return the enabled board configured for *event_name*, if any."""
        for board in self.enabled_boards:
            if board.event_name.matches(event_name):
                return board
        return None
