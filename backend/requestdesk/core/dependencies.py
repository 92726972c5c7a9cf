"""Dependency injection utilities for FastAPI"""

import logging
import secrets

from fastapi import Depends, Header, HTTPException

from requestdesk.core.board_config import ConfigHolder
from requestdesk.core.config import Settings, get_settings
from requestdesk.models import DeskConfig
from requestdesk.services import LabelProvisioner, SubmissionPipeline, TrelloAPIClient

logger = logging.getLogger(__name__)


# ============================================
# Shared resources
# ============================================


_trello_api: TrelloAPIClient | None = None
_config_holder: ConfigHolder | None = None


def get_trello_api() -> TrelloAPIClient:
    """Get shared TrelloAPIClient singleton (connection reuse)."""
    global _trello_api
    if _trello_api is None:
        settings = get_settings()
        _trello_api = TrelloAPIClient(
            app_key=settings.trello_app_key,
            user_token=settings.trello_user_token,
            timeout=settings.http_timeout_seconds,
        )
    return _trello_api


async def close_trello_api() -> None:
    """Close the shared TrelloAPIClient. Call on app shutdown."""
    global _trello_api
    if _trello_api is not None:
        await _trello_api.close()
        _trello_api = None


def get_config_holder() -> ConfigHolder:
    """Get the process-wide board configuration holder."""
    global _config_holder
    if _config_holder is None:
        _config_holder = ConfigHolder(get_settings().resolved_boards_config_path)
    return _config_holder


def get_desk_config(holder: ConfigHolder = Depends(get_config_holder)) -> DeskConfig:
    """Current board configuration, read once per request."""
    return holder.config


# ============================================
# Service Dependencies
# ============================================


def get_submission_pipeline(
    config: DeskConfig = Depends(get_desk_config),
    trello: TrelloAPIClient = Depends(get_trello_api),
) -> SubmissionPipeline:
    """Get SubmissionPipeline instance (dependency injection)"""
    return SubmissionPipeline(config, trello)


def get_label_provisioner(
    config: DeskConfig = Depends(get_desk_config),
    trello: TrelloAPIClient = Depends(get_trello_api),
) -> LabelProvisioner:
    """Get LabelProvisioner instance (dependency injection)"""
    return LabelProvisioner(config, trello)


# ============================================
# Authentication Dependencies
# ============================================


async def require_api_key(
    x_api_key: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Guard for the privileged channel: the X-API-Key header must match API_KEY."""
    if not settings.api_enabled:
        raise HTTPException(status_code=503, detail="API submissions are not enabled")

    if not x_api_key:
        logger.warning("No API key provided")
        raise HTTPException(status_code=401, detail="Missing API key")

    if not secrets.compare_digest(x_api_key.encode("utf-8"), settings.api_key.encode("utf-8")):
        logger.warning("Invalid API key")
        raise HTTPException(status_code=401, detail="Invalid API key")
