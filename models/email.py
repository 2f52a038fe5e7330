from typing import Optional

from pydantic import BaseModel


class EmailIdentity(BaseModel):
    email: str
    name: Optional[str] = None


class EmailContent(BaseModel):
    html_body: str
    text_body: str


class EmailEnvelope(BaseModel):
    sender: EmailIdentity
    recipient: EmailIdentity
    reply_to: EmailIdentity
    subject: str
    html_body: str
    text_body: str


class BrevoSendResult(BaseModel):
    message_id: str
