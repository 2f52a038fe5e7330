import html
from typing import List, Tuple

from models.contact import BUDGET_RANGE_LABELS, PROJECT_TYPE_LABELS, ContactSubmission
from models.email import EmailContent, EmailEnvelope, EmailIdentity
from utils.exceptions import ConfigurationError
from utils.logger import get_logger

logger = get_logger(__name__)

SUBJECT_PREFIX = "[Contact]"
PLACEHOLDER_ADDRESS = "no-reply@localhost"


def _detail_lines(submission: ContactSubmission) -> List[Tuple[str, str]]:
    lines = [("Name", submission.name), ("Email", submission.email), ("Subject", submission.subject)]
    if submission.project_type:
        lines.append(("Project type", PROJECT_TYPE_LABELS[submission.project_type]))
    if submission.budget:
        lines.append(("Budget", BUDGET_RANGE_LABELS[submission.budget]))
    return lines


def render_contact_email(submission: ContactSubmission) -> EmailContent:
    """
    Render a submission into the HTML and plain-text bodies of the notification email.
    Optional project type and budget lines are left out when not provided.
    """
    details = _detail_lines(submission)

    text_lines = ["New message from the contact form", ""]
    text_lines += [f"{label}: {value}" for label, value in details]
    text_lines += ["", "Message:", submission.message, "", "---",
                   f"Reply directly to this email to respond to {submission.name} ({submission.email})."]
    text_body = "\n".join(text_lines) + "\n"

    html_rows = []
    for label, value in details:
        if label == "Email":
            address = html.escape(value, quote=True)
            value_html = f'<a href="mailto:{address}" style="color: #2563eb;">{address}</a>'
        else:
            value_html = html.escape(value)
        html_rows.append(f'        <p style="margin: 0 0 8px;"><strong>{label}:</strong> {value_html}</p>')

    message_html = "<br>\n".join(html.escape(line) for line in submission.message.splitlines())

    html_body = f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(submission.subject)}</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif; background-color: #f5f5f5; margin: 0; padding: 20px;">
    <div style="background: #111827; padding: 24px; border-radius: 8px;">
        <h1 style="color: #ffffff; margin: 0; font-size: 18px;">New message</h1>
    </div>
    <div style="background: #ffffff; padding: 24px; border-radius: 8px; margin-top: 12px;">
{chr(10).join(html_rows)}
        <hr style="margin: 20px 0; border: none; border-top: 1px solid #e5e7eb;">
        <h2 style="font-size: 16px; margin: 0 0 8px;">Message</h2>
        <p style="margin: 0;">{message_html}</p>
    </div>
</body>
</html>
"""
    return EmailContent(html_body=html_body, text_body=text_body)


def build_contact_envelope(
    submission: ContactSubmission,
    settings,
    content: EmailContent,
    strict: bool = True,
) -> EmailEnvelope:
    """
    Address the rendered email: site sender -> site owner, replies go to the submitter.

    With ``strict`` a missing sender address raises ConfigurationError; otherwise a
    placeholder address is used (the email never leaves the process outside production).
    """
    sender_email = settings.brevo_sender_email
    if not sender_email:
        if strict:
            raise ConfigurationError("BREVO_SENDER_EMAIL is not set")
        sender_email = PLACEHOLDER_ADDRESS
    receiver_email = settings.receiver_email or sender_email

    return EmailEnvelope(
        sender=EmailIdentity(email=sender_email, name=settings.brevo_sender_name),
        recipient=EmailIdentity(email=receiver_email, name=settings.brevo_receiver_name),
        reply_to=EmailIdentity(email=submission.email, name=submission.name),
        subject=f"{SUBJECT_PREFIX} {submission.subject}",
        html_body=content.html_body,
        text_body=content.text_body,
    )


async def send_contact_email(submission: ContactSubmission, client, settings) -> str:
    """Render, address and dispatch a contact submission. Returns the provider message id."""
    content = render_contact_email(submission)
    envelope = build_contact_envelope(submission, settings, content, strict=settings.is_production)

    result = await client.send(envelope)
    logger.info(f"Contact email dispatched (message_id={result.message_id}, reply_to={submission.email})")
    return result.message_id
