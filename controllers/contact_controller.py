import json
import math

from fastapi import APIRouter, Request, Response, status
from pydantic import ValidationError

from constants import MESSAGE_SENT
from email_helper import send_contact_email
from models.contact import (
    ContactErrorResponse,
    ContactSubmission,
    ContactSuccessResponse,
    format_validation_errors,
)
from utils.client_ip import get_client_ip
from utils.exceptions import (
    EmailDeliveryError,
    InvalidJSONException,
    RateLimitException,
    ServerErrorException,
    ValidationException,
)
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/contact", tags=["Contact"])

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

ERROR_RESPONSES = {
    400: {"model": ContactErrorResponse, "description": "Invalid JSON or failed validation"},
    429: {"model": ContactErrorResponse, "description": "Rate limit exceeded"},
    500: {"model": ContactErrorResponse, "description": "Email delivery failed"},
}


@router.post(
    "",
    response_model=ContactSuccessResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def submit_contact(request: Request):
    """
    Validate a contact submission and forward it by email.

    Steps run in order and stop at the first failure:
    identify client -> rate limit -> parse JSON -> validate -> honeypot -> send.
    """
    settings = request.app.state.settings

    # 1. Identify
    client_ip = get_client_ip(request.headers)

    # 2. Rate limit (counted for every request, whatever happens next)
    limited = request.app.state.rate_limit_store.check(
        client_ip,
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    if limited:
        logger.warning(f"Rate limit exceeded for IP: {client_ip}")
        raise RateLimitException(retry_after=math.ceil(settings.rate_limit_window_seconds))

    # 3. Parse
    try:
        payload = json.loads(await request.body())
    except (ValueError, RecursionError):
        logger.warning(f"Invalid JSON body from IP: {client_ip}")
        raise InvalidJSONException()

    # 4. Validate
    try:
        submission = ContactSubmission.model_validate(payload)
    except ValidationError as e:
        errors = format_validation_errors(e)
        logger.warning(f"Validation error from IP {client_ip}: {errors}")
        raise ValidationException(errors)

    # 5. Honeypot: answer as if sent, send nothing
    if submission.is_spam:
        logger.warning(f"Honeypot triggered by IP {client_ip}: {submission.honeypot!r}")
        return ContactSuccessResponse(message=MESSAGE_SENT)

    # 6. Send
    try:
        message_id = await send_contact_email(
            submission,
            request.app.state.email_client,
            settings,
        )
    except EmailDeliveryError as e:
        logger.error(f"Contact email failed for IP {client_ip} (from {submission.email}): {type(e).__name__}: {e}")
        raise ServerErrorException() from e

    logger.info(f"Contact form email sent for IP {client_ip} (message_id={message_id}, from={submission.email})")

    # 7. Respond
    return ContactSuccessResponse(message=MESSAGE_SENT, message_id=message_id)


@router.options("", status_code=status.HTTP_204_NO_CONTENT)
async def contact_preflight():
    """CORS preflight for cross-origin form posts."""
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=PREFLIGHT_HEADERS)
