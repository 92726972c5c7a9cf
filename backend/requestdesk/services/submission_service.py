"""Card submission pipeline.

A submission runs through fixed steps, in order:

1. validate the request (all violations collected)
2. resolve the event's board
3. resolve the board's "incoming" list
4. format the card description
5. resolve label ids (missing labels are omitted)
6. create the card
7. upload attachments, each one independently

Steps 1-3 and 6 are fatal on failure and stop the pipeline. Label and
attachment problems are recorded and logged, never raised.
"""

import asyncio
import base64
import binascii
import logging
import re
from datetime import datetime, timezone

import pydantic

from requestdesk.core.exceptions import (
    AttachmentUploadError,
    BoardResolutionError,
    CardCreateError,
    TrelloAPIError,
    ValidationError,
)
from requestdesk.models import (
    PRIVILEGED_LABEL_NAME,
    AttachmentPayload,
    AttachmentResult,
    CardCreationResult,
    CaselessName,
    DeskConfig,
    FieldError,
    SubmissionRequest,
    field_errors,
)

from .board_registry import BoardRegistry
from .trello_api import TrelloAPIClient

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:[^,]*;base64,", re.IGNORECASE)

PUBLIC_BANNER = "**THIS IS AN AUTOMATICALLY CREATED CARD FROM AN ONLINE SUBMITTED TEAM REQUEST**"
API_BANNER = "**THIS IS AN AUTOMATICALLY CREATED CARD FROM AN AUTOMATED API SUBMISSION**"


# ============================================
# Validation
# ============================================


def validate_submission(request: SubmissionRequest) -> list[FieldError]:
    """Check a request against the schema for its channel.

    Returns every violation found; an empty list means the request is valid.
    The privileged channel only requires title, team number and event.
    """
    try:
        request.schema.model_validate(request.to_payload())
    except pydantic.ValidationError as e:
        return field_errors(e.errors())
    return []


# ============================================
# Formatting
# ============================================


def format_card_name(request: SubmissionRequest) -> str:
    return f"{request.team_number}: {request.title}"


def format_description(request: SubmissionRequest) -> str:
    """Markdown body of the card."""
    if request.is_privileged_channel:
        parts = [
            API_BANNER,
            f"**Team Number:** {request.team_number}",
            f"**Submitted By:** {request.contact_name}",
        ]
        if request.description:
            parts.append(f"**Description:** {request.description}")
        return "\n\n".join(parts)

    return "\n\n".join(
        [
            PUBLIC_BANNER,
            f"**Team Number:** {request.team_number}",
            f"**Contact Email:** {request.contact_email}",
            f"**Contact Name:** {request.contact_name or ''}",
            f"**Description:** {request.description}",
        ]
    )


def decode_attachment(data: str) -> bytes:
    """Decode base64 attachment data, accepting an optional data-URI prefix."""
    payload = _DATA_URI_RE.sub("", data.strip(), count=1)
    # Line-wrapped and unpadded base64 are both accepted
    payload = "".join(payload.split())
    payload += "=" * (-len(payload) % 4)
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValueError("data is not valid base64") from None


# ============================================
# Pipeline
# ============================================


class SubmissionPipeline:
    """Turns one submission into one card."""

    def __init__(self, config: DeskConfig, trello: TrelloAPIClient) -> None:
        self.trello = trello
        self.registry = BoardRegistry(config, trello)

    async def submit(self, request: SubmissionRequest) -> CardCreationResult:
        """Run every step for *request*.

        Raises:
            ValidationError: the request breaks the rules for its channel
            BoardResolutionError: unknown event or no incoming list
            CardCreateError: the board service refused or failed the card
        """
        self._validate(request)
        board_id = self._resolve_board(request)
        list_id = await self._resolve_list(board_id)
        description = format_description(request)
        label_ids = await self._resolve_labels(board_id, request)
        card_id = await self._create_card(request, list_id, description, label_ids)
        attachment_results = await self._upload_attachments(card_id, request.attachments)

        return CardCreationResult(
            card_id=card_id,
            label_ids_applied=label_ids,
            attachment_results=attachment_results,
        )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _validate(self, request: SubmissionRequest) -> None:
        errors = validate_submission(request)
        if errors:
            logger.debug(f"Submission rejected: {[e.field for e in errors]}")
            raise ValidationError(errors)

    def _resolve_board(self, request: SubmissionRequest) -> str:
        try:
            return self.registry.resolve_board(request.event_name)
        except BoardResolutionError as e:
            logger.warning(str(e))
            raise

    async def _resolve_list(self, board_id: str) -> str:
        try:
            return await self.registry.resolve_incoming_list_id(board_id)
        except BoardResolutionError as e:
            logger.warning(str(e))
            raise

    async def _resolve_labels(self, board_id: str, request: SubmissionRequest) -> list[str]:
        public = not request.is_privileged_channel
        names: list[tuple[str | None, bool]] = [
            (request.problem_category, public),
            (request.priority, public),
        ]
        if request.is_privileged_channel:
            names.append((PRIVILEGED_LABEL_NAME, True))

        wanted: list[tuple[CaselessName, bool]] = []
        for raw_name, required in names:
            name = CaselessName.parse(raw_name)
            if name is not None:
                wanted.append((name, required))
        if not wanted:
            return []

        # One read of the board's labels serves every lookup in this submission
        try:
            board_labels = await self.registry.board_labels(board_id)
        except TrelloAPIError as e:
            logger.warning(f"Label lookup on board {board_id} failed, card gets no labels: {e}")
            return []

        label_ids: list[str] = []
        for label_name, required in wanted:
            label_id = board_labels.get(label_name)
            if label_id is None:
                if required:
                    logger.warning(f"Label '{label_name}' not found on board {board_id}, omitting")
                continue
            if label_id not in label_ids:
                label_ids.append(label_id)
        return label_ids

    async def _create_card(
        self,
        request: SubmissionRequest,
        list_id: str,
        description: str,
        label_ids: list[str],
    ) -> str:
        try:
            card = await self.trello.create_card(
                list_id=list_id,
                name=format_card_name(request),
                description=description,
                label_ids=label_ids,
                start=datetime.now(timezone.utc).isoformat(),
                position="top",
            )
        except TrelloAPIError as e:
            logger.error(f"Error creating card on list {list_id}: {e}")
            raise CardCreateError(e.status_code, e.message) from e

        card_id = str(card["id"])
        logger.info(f"Card {card_id} created for team {request.team_number}")
        return card_id

    async def _upload_attachments(
        self, card_id: str, attachments: list[AttachmentPayload]
    ) -> list[AttachmentResult]:
        if not attachments:
            return []
        logger.info(f"Adding {len(attachments)} attachments to card {card_id}")
        results = await asyncio.gather(
            *(self._upload_attachment(card_id, attachment) for attachment in attachments)
        )
        failed = sum(1 for result in results if not result.ok)
        logger.info(f"All attachments processed for card {card_id} ({failed} failed)")
        return list(results)

    async def _upload_attachment(
        self, card_id: str, attachment: AttachmentPayload
    ) -> AttachmentResult:
        name = str(attachment.name)
        try:
            content = decode_attachment(attachment.data)
        except ValueError as e:
            return self._attachment_failed(card_id, AttachmentUploadError(name, str(e)))

        try:
            await self.trello.create_card_attachment(card_id, name, content)
        except TrelloAPIError as e:
            return self._attachment_failed(card_id, AttachmentUploadError(name, str(e)))
        except Exception as e:
            logger.exception(f"Unexpected error uploading {name} to card {card_id}")
            return AttachmentResult(name=name, ok=False, error=f"upload failed: {type(e).__name__}")

        logger.info(f"Attachment {name} added to card {card_id}")
        return AttachmentResult(name=name, ok=True)

    @staticmethod
    def _attachment_failed(card_id: str, error: AttachmentUploadError) -> AttachmentResult:
        logger.error(f"Error adding attachment to card {card_id}: {error}")
        return AttachmentResult(name=error.name, ok=False, error=error.message)
