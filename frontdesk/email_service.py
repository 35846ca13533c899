"""
Email Service using Resend
Provides email functionality using MJML templates for responsive design.
A failed send is logged and reported as False; it never fails the caller.
"""

import logging
from typing import Optional, Union

import resend
from mjml import mjml2html as mjml_to_html

from .config import APP_URL, EMAIL_FROM_ADDRESS, RESEND_API_KEY
from .email_templates import (
    ticket_assigned_template,
    ticket_created_template,
    ticket_message_template,
    ticket_updated_template,
    visitor_arrival_template,
)
from .security_utils import generate_action_token

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    result = mjml_to_html(mjml_content)
    # mjml_to_html returns a result with 'html' and 'errors'
    errors = getattr(result, "errors", None) or (result.get("errors") if isinstance(result, dict) else None)
    if errors:
        logger.warning(f"MJML compilation warnings: {errors}")
    if isinstance(result, dict):
        return result.get("html", "")
    return getattr(result, "html", str(result))


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> bool:
    """
    Send an email through Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)

    Returns:
        True when the provider accepted the message
    """
    recipients = [to] if isinstance(to, str) else to

    if not RESEND_API_KEY:
        logger.error(f"❌ Email service not configured - RESEND_API_KEY missing, dropping '{subject}'")
        return False

    try:
        html_content = compile_mjml_to_html(mjml_content)
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(
            {
                "from": from_address or EMAIL_FROM_ADDRESS,
                "to": recipients,
                "subject": subject,
                "html": html_content,
            }
        )
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return True
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        return False


def ticket_url(ticket_id: int) -> str:
    return f"{APP_URL}/it/tickets/{ticket_id}"


def visitor_response_url(token: str, action: str) -> str:
    return f"{APP_URL}/employee/respond?token={token}&action={action}"


# ============================================
# Workflow emails
# ============================================


async def send_visitor_arrival_email(
    to: str,
    host_name: str,
    visitor_id: int,
    host_staff_id: int,
    visitor_name: str,
    visitor_company: str,
    visitor_email: str,
    visitor_phone: str,
    reason_for_visit: Optional[str],
    check_in_time: str,
) -> bool:
    """Arrival notice with one signed link per action"""
    accept_url = visitor_response_url(generate_action_token(visitor_id, host_staff_id, "accept"), "accept")
    decline_url = visitor_response_url(generate_action_token(visitor_id, host_staff_id, "decline"), "decline")
    mjml_content = visitor_arrival_template(
        host_name=host_name,
        visitor_name=visitor_name,
        visitor_company=visitor_company,
        visitor_email=visitor_email,
        visitor_phone=visitor_phone,
        reason_for_visit=reason_for_visit,
        check_in_time=check_in_time,
        accept_url=accept_url,
        decline_url=decline_url,
    )
    return await send_email(
        to=to,
        subject=f"Visitor Arrival: {visitor_name} is here to see you",
        mjml_content=mjml_content,
    )


async def send_ticket_created_email(
    to: str,
    requester_name: str,
    ticket_id: int,
    ticket_number: str,
    ticket_title: str,
    priority: str,
    category: Optional[str],
) -> bool:
    mjml_content = ticket_created_template(
        ticket_number=ticket_number,
        ticket_title=ticket_title,
        requester_name=requester_name,
        priority=priority,
        category=category,
        ticket_url=ticket_url(ticket_id),
    )
    return await send_email(
        to=to,
        subject=f"Ticket Created: {ticket_title} [#{ticket_number}]",
        mjml_content=mjml_content,
    )


async def send_ticket_updated_email(
    to: str,
    ticket_id: int,
    ticket_number: str,
    ticket_title: str,
    old_status: str,
    new_status: str,
    updated_by: str,
) -> bool:
    mjml_content = ticket_updated_template(
        ticket_number=ticket_number,
        ticket_title=ticket_title,
        old_status=old_status,
        new_status=new_status,
        updated_by=updated_by,
        ticket_url=ticket_url(ticket_id),
    )
    return await send_email(
        to=to,
        subject=f"Ticket Updated: {ticket_title} [#{ticket_number}]",
        mjml_content=mjml_content,
    )


async def send_ticket_message_email(
    to: str,
    ticket_id: int,
    ticket_number: str,
    ticket_title: str,
    sender_name: str,
    message: str,
) -> bool:
    mjml_content = ticket_message_template(
        ticket_number=ticket_number,
        ticket_title=ticket_title,
        sender_name=sender_name,
        message=message,
        ticket_url=ticket_url(ticket_id),
    )
    return await send_email(
        to=to,
        subject=f"New Message: {ticket_title} [#{ticket_number}]",
        mjml_content=mjml_content,
    )


async def send_ticket_assigned_email(to: str, ticket_id: int, ticket_number: str, ticket_title: str) -> bool:
    mjml_content = ticket_assigned_template(
        ticket_number=ticket_number,
        ticket_title=ticket_title,
        ticket_url=ticket_url(ticket_id),
    )
    return await send_email(
        to=to,
        subject=f"Ticket Assigned to You: {ticket_title} [#{ticket_number}]",
        mjml_content=mjml_content,
    )
