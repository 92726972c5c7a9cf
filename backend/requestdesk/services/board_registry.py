"""Board registry: maps event names to boards and label names to label ids.

Read-only: every method issues fresh lookups against the board service and
nothing is cached between calls.
"""

import logging

from requestdesk.core.exceptions import BoardResolutionError, TrelloAPIError
from requestdesk.models import CaselessName, DeskConfig

from .trello_api import TrelloAPIClient

logger = logging.getLogger(__name__)

INCOMING_LIST_NAME = CaselessName("incoming")


class BoardRegistry:
    """Resolves boards, incoming lists and labels for the current configuration."""

    def __init__(self, config: DeskConfig, trello: TrelloAPIClient) -> None:
        self.config = config
        self.trello = trello

    def resolve_board(self, event_name: str | None) -> str:
        """Board id configured for *event_name*. No fallback to the default event."""
        board = self.config.find_board(event_name)
        if board is None:
            raise BoardResolutionError(f"No enabled board is configured for event '{event_name}'")
        return board.board_id

    async def resolve_incoming_list_id(self, board_id: str) -> str:
        """Id of the board's "incoming" list. Never creates one."""
        try:
            lists = await self.trello.get_board_lists(board_id)
        except TrelloAPIError as e:
            raise BoardResolutionError(f"Could not read lists of board {board_id}: {e}") from e

        for trello_list in lists:
            if INCOMING_LIST_NAME.matches(trello_list.get("name")) and trello_list.get("id"):
                return str(trello_list["id"])
        raise BoardResolutionError(f"Board {board_id} has no '{INCOMING_LIST_NAME}' list")

    async def board_labels(self, board_id: str) -> dict[CaselessName, str]:
        """All labels on a board keyed by name. Unnamed labels are skipped."""
        labels = await self.trello.get_board_labels(board_id)
        result: dict[CaselessName, str] = {}
        for label in labels:
            name = CaselessName.parse(label.get("name"))
            if name is None or not label.get("id"):
                continue
            # First match wins, same as a linear search by name
            result.setdefault(name, str(label["id"]))
        return result

    async def resolve_label_id(self, board_id: str, label_name: str | None) -> str | None:
        """Label id for *label_name* on the board, or None when absent or unreadable."""
        name = CaselessName.parse(label_name)
        if name is None:
            return None
        try:
            labels = await self.board_labels(board_id)
        except TrelloAPIError as e:
            logger.warning(f"Label lookup for '{name}' on board {board_id} failed: {e}")
            return None
        return labels.get(name)

    async def fetch_board_id(self, board_id: str) -> str:
        """Full board id for a configured (short) board id."""
        board = await self.trello.get_board(board_id)
        full_id = board.get("id")
        if not full_id:
            raise TrelloAPIError(None, f"board {board_id} has no id")
        return str(full_id)
