"""
HTTP client for the contact endpoint, used by ContactForm and scripts.
"""
from typing import List, Optional

import httpx


CONTACT_PATH = "/api/contact"
DEFAULT_ERROR_MESSAGE = "Error while sending the message"
DEFAULT_TIMEOUT_SECONDS = 10.0


class ContactApiError(Exception):
    """The endpoint rejected the submission or could not be reached."""
    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        errors: Optional[List[dict]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.code = code
        self.errors = errors or []
        self.status_code = status_code
        super().__init__(self.message)


class ContactApiClient:
    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.base_url = base_url.rstrip("/")
        self._transport = transport
        self.timeout = timeout

    async def send_contact_message(self, values: dict) -> dict:
        """POST the form values. Returns the success body or raises ContactApiError."""
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(CONTACT_PATH, json=values)
        except httpx.HTTPError as e:
            raise ContactApiError(f"Could not reach the server: {type(e).__name__}") from e

        try:
            result = response.json()
        except ValueError:
            result = {}
        if not isinstance(result, dict):
            result = {}

        if not response.is_success:
            raise ContactApiError(
                result.get("error") or DEFAULT_ERROR_MESSAGE,
                code=result.get("code"),
                errors=result.get("errors"),
                status_code=response.status_code,
            )

        return result
