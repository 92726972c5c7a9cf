"""Services layer - Business logic

This module provides service classes for handling business logic.
Services are initialized with their dependencies and accessed through dependency injection.
"""

from .board_registry import BoardRegistry
from .label_service import LabelProvisioner, ProvisioningFailure, ProvisioningReport
from .submission_service import (
    SubmissionPipeline,
    decode_attachment,
    format_description,
    validate_submission,
)
from .trello_api import TrelloAPIClient

__all__ = [
    "BoardRegistry",
    "LabelProvisioner",
    "ProvisioningFailure",
    "ProvisioningReport",
    "SubmissionPipeline",
    "TrelloAPIClient",
    "decode_attachment",
    "format_description",
    "validate_submission",
]
