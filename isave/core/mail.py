from isave.core.logger import logger
import os
from typing import Dict, Any, Optional
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail
from python_http_client.exceptions import BadRequestsError


def send_email(
    to_email: str,
    subject: str,
    template_id: Optional[str] = None,
    template_data: Optional[Dict[str, Any]] = None,
) -> bool:
    """
    Send an email using a SendGrid dynamic template.

    Args:
        to_email: Recipient email address
        subject: Email subject (passed to the template as ``subject``)
        template_id: SendGrid template ID
        template_data: Data for template (optional)

    Returns:
        bool: True if email was sent successfully

    Raises:
        ValueError: If required parameters are missing
        BadRequestsError: If SendGrid API rejects the request
    """
    if not to_email:
        raise ValueError("Recipient email is required")
    if not template_id:
        raise ValueError("template_id must be provided")

    from_email = os.environ.get("FROM_EMAIL")
    if not from_email:
        raise ValueError("FROM_EMAIL environment variable not set")

    message = Mail(from_email=from_email, to_emails=to_email)
    template_data = dict(template_data or {})
    template_data["subject"] = subject
    message.template_id = template_id
    message.dynamic_template_data = template_data
    logger.debug(
        f"Sending dynamic template email: template_id={template_id}, data={template_data}"
    )

    try:
        sg = SendGridAPIClient(os.environ.get("SENDGRID_API_KEY"))
        response = sg.send(message)
    except BadRequestsError as e:
        logger.error(
            f"SendGrid API error sending email to {to_email}: {str(e)} - Response: {e.body}"
        )
        raise

    logger.info(f"Email sent to {to_email} with status {response.status_code}")
    return True
