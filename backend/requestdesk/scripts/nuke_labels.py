"""Delete ALL labels on ALL configured boards.

Destructive: labels created by hand are removed too. Use it to start fresh and
let the server recreate the taxonomy on its next startup.
"""

import asyncio
import logging
import sys

from rich.console import Console
from rich.prompt import Prompt

from requestdesk.core.board_config import load_desk_config
from requestdesk.core.config import Settings, get_settings
from requestdesk.core.exceptions import ConfigError
from requestdesk.core.logging import setup_logging
from requestdesk.services import LabelProvisioner, TrelloAPIClient

logger = logging.getLogger(__name__)

CONFIRM_ANSWERS = {"yes", "y"}


def confirmed(answer: str) -> bool:
    return answer.strip().lower() in CONFIRM_ANSWERS


async def nuke_labels(settings: Settings) -> int:
    """Delete every label on every configured board and return the count."""
    config = load_desk_config(settings.resolved_boards_config_path)
    trello = TrelloAPIClient(
        app_key=settings.trello_app_key,
        user_token=settings.trello_user_token,
        timeout=settings.http_timeout_seconds,
    )
    try:
        return await LabelProvisioner(config, trello).delete_all_labels_on_all_boards()
    finally:
        await trello.close()


def main(console: Console | None = None) -> int:
    console = console or Console()
    settings = get_settings()
    setup_logging(settings)

    logger.info("Prompting user to confirm deletion of all labels on all boards")
    answer = Prompt.ask(
        "[yellow]Are you sure you want to delete all labels on all boards?\n"
        "This is a destructive action and will remove all labels, "
        "including any you have created yourself.[/yellow] (yes/no)",
        console=console,
        default="no",
    )
    if not confirmed(answer):
        logger.info("User chose not to delete all labels on all boards")
        return 0

    try:
        deleted = asyncio.run(nuke_labels(settings))
    except ConfigError as e:
        logger.error(str(e))
        return 1

    logger.info(f"Deleted {deleted} labels across all boards")
    return 0


if __name__ == "__main__":
    sys.exit(main())
