"""
zk-form Verify Routes
=====================

API endpoint receiving zk-form submissions.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from services.zk_form.services.submission import SubmissionError, SubmissionService
from shared.logging import bind_submission_context, clear_context, get_logger
from shared.models.submission import SubmissionRequest, SubmissionResponse


logger = get_logger(__name__)
router = APIRouter()


def get_submission_service(request: Request) -> SubmissionService:
    """Dependency that provides the service built at startup."""
    return request.app.state.submission_service


@router.post("/verify", response_model=SubmissionResponse)
async def verify_submission(
    body: SubmissionRequest,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    """
    Verify a zk-form submission and record it.

    The proof response is checked by the verification service. On success the
    submitted fields, together with the verified identifiers and claims the
    app is configured to save, are appended to the app's spreadsheet.

    Returns:
        SubmissionResponse with status "subscribed", or "already-subscribed"
        when the vault id is already recorded
    """
    bind_submission_context(body.space_slug, body.app_slug)
    logger.info("verify_submission_received", fields=len(body.fields))

    try:
        submission_status = await service.submit(body)
    except SubmissionError as e:
        raise HTTPException(status_code=e.status_code, detail=e.reason) from e
    finally:
        clear_context()

    return SubmissionResponse(status=submission_status)
