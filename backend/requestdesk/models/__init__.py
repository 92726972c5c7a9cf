"""Data models for the request desk."""

from .board import BoardConfig, CaselessName, DeskConfig, LabelColor, LabelSpec
from .submission import (
    PRIVILEGED_CONTACT_NAME,
    PRIVILEGED_LABEL_NAME,
    AttachmentIn,
    AttachmentPayload,
    AttachmentResult,
    CardCreationResult,
    FieldError,
    PrivilegedSubmission,
    PublicSubmission,
    SubmissionBody,
    SubmissionRequest,
    field_errors,
)

__all__ = [
    "PRIVILEGED_CONTACT_NAME",
    "PRIVILEGED_LABEL_NAME",
    "AttachmentIn",
    "AttachmentPayload",
    "AttachmentResult",
    "BoardConfig",
    "CardCreationResult",
    "CaselessName",
    "DeskConfig",
    "FieldError",
    "LabelColor",
    "LabelSpec",
    "PrivilegedSubmission",
    "PublicSubmission",
    "SubmissionBody",
    "SubmissionRequest",
    "field_errors",
]
