"""Help-request submission API routes"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from requestdesk.core.dependencies import get_submission_pipeline, require_api_key
from requestdesk.core.exceptions import BoardResolutionError, CardCreateError, ValidationError
from requestdesk.models import PrivilegedSubmission, PublicSubmission, SubmissionRequest
from requestdesk.services import SubmissionPipeline

from .errors import validation_error_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["submissions"])


# ============================================
# Helpers
# ============================================


async def _run_submission(pipeline: SubmissionPipeline, request: SubmissionRequest) -> Any:
    channel = "api" if request.is_privileged_channel else "form"
    logger.info(
        f"Submission via {channel}: team={request.team_number!s} event={request.event_name!s} "
        f"attachments={len(request.attachments)}"
    )
    try:
        result = await pipeline.submit(request)
    except ValidationError as e:
        return validation_error_response(e.errors)
    except BoardResolutionError as e:
        raise HTTPException(status_code=500, detail=str(e)) from None
    except CardCreateError as e:
        raise HTTPException(status_code=500, detail=str(e)) from None
    except Exception as e:
        logger.exception(f"Unexpected error handling submission: {e}")
        raise HTTPException(status_code=500, detail="Failed to create request card") from None
    return result.to_dict()


# ============================================
# Endpoints
# ============================================


@router.post("/submit")
async def submit_form(
    body: PublicSubmission,
    pipeline: SubmissionPipeline = Depends(get_submission_pipeline),
) -> Any:
    """Public form submission: every field is validated."""
    request = SubmissionRequest.from_submission(body)
    return await _run_submission(pipeline, request)


@router.post("/api/submit", dependencies=[Depends(require_api_key)])
async def submit_api(
    body: PrivilegedSubmission,
    pipeline: SubmissionPipeline = Depends(get_submission_pipeline),
) -> Any:
    """Key-protected submission with relaxed required fields and the FTA label."""
    request = SubmissionRequest.from_submission(body)
    return await _run_submission(pipeline, request)
