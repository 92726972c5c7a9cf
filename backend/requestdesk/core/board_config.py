"""Loading and validation of the board/label configuration file.

The file maps each event shown on the request form to a Trello board and
lists the label taxonomy that must exist on every board::

    {
      "trelloBoards": [
        {"frontendEventSelection": "Off Season", "trelloId": "CxCc1Ofe", "enabled": true}
      ],
      "trelloBoardLabels": [{"name": "Mechanical", "color": "orange"}],
      "defaultEvent": "Off Season"
    }

The result is a frozen ``DeskConfig``. ``ConfigHolder`` keeps the current one
and swaps it wholesale on reload.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from requestdesk.core.exceptions import ConfigError
from requestdesk.models import (
    PRIVILEGED_LABEL_NAME,
    BoardConfig,
    CaselessName,
    DeskConfig,
    LabelColor,
    LabelSpec,
)

logger = logging.getLogger(__name__)

PRIVILEGED_LABEL_COLOR = LabelColor.PURPLE


# ============================================
# File schema
# ============================================


class _BoardEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    event_name: str = Field(validation_alias=AliasChoices("frontendEventSelection", "eventName"))
    board_id: str = Field(validation_alias=AliasChoices("trelloId", "boardId"))
    enabled: bool = True


class _LabelEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    color: LabelColor


class _ConfigFile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    boards: list[_BoardEntry] = Field(validation_alias=AliasChoices("trelloBoards", "boards"))
    labels: list[_LabelEntry] = Field(validation_alias=AliasChoices("trelloBoardLabels", "labels"))
    default_event: str | None = Field(
        default=None, validation_alias=AliasChoices("defaultEvent", "default_event")
    )


# ============================================
# Parsing
# ============================================


def parse_desk_config(data: object) -> DeskConfig:
    """Validate a decoded configuration document and build a ``DeskConfig``."""
    try:
        raw = _ConfigFile.model_validate(data)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid board configuration: {problems}") from None

    if not raw.boards:
        raise ConfigError("Board configuration must list at least one board")
    if not raw.labels:
        raise ConfigError("Board configuration must list at least one label")

    boards = tuple(_build_board(entry, index) for index, entry in enumerate(raw.boards))
    enabled_events: set[CaselessName] = set()
    for board in boards:
        if not board.enabled:
            continue
        if board.event_name in enabled_events:
            raise ConfigError(f"Event '{board.event_name}' has more than one enabled board")
        enabled_events.add(board.event_name)

    labels = _build_labels(raw.labels)
    default_event = _resolve_default_event(raw.default_event, boards)

    return DeskConfig(boards=boards, labels=labels, default_event=default_event)


def load_desk_config(path: Path) -> DeskConfig:
    """Read and validate the configuration file at *path*."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Board configuration file not found: {path}") from None
    except OSError as e:
        raise ConfigError(f"Cannot read board configuration {path}: {e}") from None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Invalid JSON in board configuration {path}: {e.msg} at line {e.lineno}"
        ) from None

    config = parse_desk_config(data)
    logger.info(
        f"Loaded board configuration: {len(config.boards)} boards "
        f"({len(config.enabled_boards)} enabled), {len(config.labels)} labels"
    )
    return config


def _build_board(entry: _BoardEntry, index: int) -> BoardConfig:
    try:
        event_name = CaselessName(entry.event_name)
    except ValueError:
        raise ConfigError(f"Board #{index} has an empty event name") from None
    board_id = entry.board_id.strip()
    if not board_id:
        raise ConfigError(f"Board for event '{event_name}' has an empty board id")
    return BoardConfig(event_name=event_name, board_id=board_id, enabled=entry.enabled)


def _build_labels(entries: list[_LabelEntry]) -> tuple[LabelSpec, ...]:
    labels: list[LabelSpec] = []
    seen: set[CaselessName] = set()
    for index, entry in enumerate(entries):
        try:
            name = CaselessName(entry.name)
        except ValueError:
            raise ConfigError(f"Label #{index} has an empty name") from None
        if name in seen:
            raise ConfigError(f"Label '{name}' is listed more than once")
        seen.add(name)
        labels.append(LabelSpec(name=name, color=entry.color))

    privileged = CaselessName(PRIVILEGED_LABEL_NAME)
    if privileged not in seen:
        labels.append(LabelSpec(name=privileged, color=PRIVILEGED_LABEL_COLOR))
    return tuple(labels)


def _resolve_default_event(
    raw_default: str | None, boards: tuple[BoardConfig, ...]
) -> CaselessName | None:
    default_event = CaselessName.parse(raw_default)
    if default_event is None:
        enabled = [board for board in boards if board.enabled]
        return enabled[0].event_name if enabled else None

    matching = [board for board in boards if board.event_name == default_event]
    if not matching:
        raise ConfigError(f"Default event '{default_event}' does not match any configured board")
    if not any(board.enabled for board in matching):
        logger.warning(f"Default event '{default_event}' refers to a disabled board")
    return matching[0].event_name


# ============================================
# Holder
# ============================================


class ConfigHolder:
    """Owns the active ``DeskConfig`` and reloads it from disk on request."""

    def __init__(self, path: Path, config: DeskConfig | None = None) -> None:
        self.path = path
        self._config = config

    @property
    def config(self) -> DeskConfig:
        if self._config is None:
            self._config = load_desk_config(self.path)
        return self._config

    def reload(self) -> DeskConfig:
        """Load the file again; the previous config stays active on failure."""
        config = load_desk_config(self.path)
        self._config = config
        logger.info(f"Board configuration reloaded from {self.path}")
        return config
