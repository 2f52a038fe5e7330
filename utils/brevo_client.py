"""
Brevo transactional email client.
Sends one email per call through the Brevo HTTP API, without retries.
"""
from typing import Optional

import httpx

from constants import DEV_MESSAGE_ID, UNKNOWN_MESSAGE_ID
from models.email import BrevoSendResult, EmailEnvelope
from utils.exceptions import ConfigurationError, TransportError
from utils.logger import get_logger

logger = get_logger(__name__)


def build_brevo_payload(envelope: EmailEnvelope) -> dict:
    """Shape an envelope into the JSON body expected by POST /v3/smtp/email."""
    return {
        "sender": {"name": envelope.sender.name, "email": envelope.sender.email},
        "to": [{"email": envelope.recipient.email, "name": envelope.recipient.name}],
        "replyTo": {"email": envelope.reply_to.email, "name": envelope.reply_to.name},
        "subject": envelope.subject,
        "htmlContent": envelope.html_body,
        "textContent": envelope.text_body,
    }


def _json_object(response: httpx.Response) -> dict:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class BrevoClient:
    """
    Thin wrapper around the Brevo send endpoint.

    Outside production no request is made and a sentinel message id is
    returned, so development never spends provider quota.
    """

    def __init__(self, settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    async def send(self, envelope: EmailEnvelope) -> BrevoSendResult:
        if not self.settings.is_production:
            logger.info(
                f"[DEV] Email not sent (Brevo disabled outside production): "
                f"subject={envelope.subject!r}, to={envelope.recipient.email}, reply_to={envelope.reply_to.email}"
            )
            return BrevoSendResult(message_id=DEV_MESSAGE_ID)

        api_key = self.settings.brevo_api_key
        if not api_key:
            raise ConfigurationError("BREVO_API_KEY is not set")

        headers = {
            "api-key": api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.brevo_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.settings.brevo_api_url,
                    json=build_brevo_payload(envelope),
                    headers=headers,
                )
        except httpx.HTTPError as e:
            logger.error(f"Brevo request failed: {type(e).__name__}: {e}")
            raise TransportError(f"Failed to reach Brevo: {type(e).__name__}") from e

        if not response.is_success:
            error = _json_object(response)
            provider_message = error.get("message")
            provider_code = error.get("code")
            logger.error(
                f"Brevo API error (status={response.status_code}, code={provider_code}, message={provider_message})"
            )
            raise TransportError(
                f"Failed to send email: {provider_message or response.reason_phrase or 'Unknown error'}",
                status_code=response.status_code,
                provider_message=provider_message,
                provider_code=provider_code,
            )

        data = _json_object(response)
        message_id = data.get("messageId") or UNKNOWN_MESSAGE_ID
        logger.info(f"Brevo accepted email (message_id={message_id}, to={envelope.recipient.email})")
        return BrevoSendResult(message_id=message_id)
