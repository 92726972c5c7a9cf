"""Label provisioning: keeps the label taxonomy present on every board."""

import logging
from dataclasses import dataclass, field

from requestdesk.core.exceptions import TrelloAPIError
from requestdesk.models import DeskConfig

from .board_registry import BoardRegistry
from .trello_api import TrelloAPIClient

logger = logging.getLogger(__name__)


@dataclass
class ProvisioningFailure:
    board_id: str
    label_name: str | None
    message: str


@dataclass
class ProvisioningReport:
    """What one provisioning run did, per board and label."""

    created: list[tuple[str, str]] = field(default_factory=list)
    existing: list[tuple[str, str]] = field(default_factory=list)
    failures: list[ProvisioningFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "created": [{"boardId": b, "label": name} for b, name in self.created],
            "existing": len(self.existing),
            "failures": [
                {"boardId": f.board_id, "label": f.label_name, "message": f.message}
                for f in self.failures
            ],
        }


class LabelProvisioner:
    """Creates missing taxonomy labels; also hosts the destructive label wipe."""

    def __init__(self, config: DeskConfig, trello: TrelloAPIClient) -> None:
        self.config = config
        self.trello = trello
        self.registry = BoardRegistry(config, trello)

    async def verify_labels(self) -> ProvisioningReport:
        """Ensure every configured label exists on every configured board.

        Idempotent. A failure on one board or label is logged and recorded,
        and provisioning moves on to the next one.
        """
        report = ProvisioningReport()
        for board in self.config.boards:
            await self._verify_board(board.board_id, report)

        logger.info(
            f"Label verification done: {len(report.created)} created, "
            f"{len(report.existing)} present, {len(report.failures)} failed"
        )
        return report

    async def _verify_board(self, board_id: str, report: ProvisioningReport) -> None:
        try:
            full_id = await self.registry.fetch_board_id(board_id)
            present = await self.registry.board_labels(board_id)
        except TrelloAPIError as e:
            logger.error(f"Error getting labels on board {board_id}: {e}")
            report.failures.append(ProvisioningFailure(board_id, None, str(e)))
            return

        logger.info(f"Found {len(present)} labels on board {board_id}")
        for spec in self.config.labels:
            if spec.name in present:
                report.existing.append((board_id, spec.name.value))
                continue
            try:
                await self.trello.create_label(full_id, spec.name.value, spec.color.value)
            except TrelloAPIError as e:
                logger.error(f"Error creating label {spec.name} on board {board_id}: {e}")
                report.failures.append(ProvisioningFailure(board_id, spec.name.value, str(e)))
                continue
            logger.info(f"Created label {spec.name} on board {board_id}")
            report.created.append((board_id, spec.name.value))

    # ------------------------------------------------------------------
    # Destructive operations (nuke-labels script only)
    # ------------------------------------------------------------------

    async def delete_all_labels_on_board(self, board_id: str) -> int:
        """Delete every label on the board, including ones not in the taxonomy."""
        try:
            labels = await self.trello.get_board_labels(board_id)
        except TrelloAPIError as e:
            logger.error(f"Error getting labels on board {board_id}: {e}")
            return 0

        deleted = 0
        for label in labels:
            label_id = label.get("id")
            if not label_id:
                continue
            try:
                await self.trello.delete_label(str(label_id))
            except TrelloAPIError as e:
                logger.error(f"Error deleting label {label.get('name')} on board {board_id}: {e}")
                continue
            deleted += 1
            logger.info(f"Deleted label {label.get('name')} on board {board_id}")
        return deleted

    async def delete_all_labels_on_all_boards(self) -> int:
        total = 0
        for board in self.config.boards:
            total += await self.delete_all_labels_on_board(board.board_id)
        return total
