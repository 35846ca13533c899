"""
MJML Email Templates
Visitor arrival and IT ticket lifecycle emails
"""

from html import escape
from typing import Optional

# Front desk theme colors - Blue/Slate
THEME = {
    "primary": "#3b82f6",
    "primary_dark": "#2563eb",
    "background": "#f8fafc",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
    "success": "#10b981",
    "danger": "#ef4444",
}

PRIORITY_COLORS = {
    "Low": "#64748b",
    "Medium": "#3b82f6",
    "High": "#f59e0b",
    "Critical": "#ef4444",
}


def _button(url: str, label: str, color: str) -> str:
    return f"""
    <mj-button href="{url}" background-color="{color}" color="#ffffff"
      font-weight="600" border-radius="8px" padding="8px 0" inner-padding="14px 32px">
      {label}
    </mj-button>
    """


def _detail_row(label: str, value: Optional[str]) -> str:
    if not value:
        return ""
    return f"""
    <mj-text padding="4px 0">
      <strong>{label}:</strong> {escape(value)}
    </mj-text>
    """


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section background-color="#ffffff" padding="0 40px 40px 40px">
          <mj-column>
            {_button(cta_url, cta_label, THEME['primary'])}
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="#ffffff" padding="32px 40px 0 40px">
          <mj-column>
            <mj-text font-size="14px" font-weight="600" color="{THEME['primary']}" padding="0">
              Front Desk
            </mj-text>
            <mj-divider border-color="{THEME['border']}" border-width="1px" padding="16px 0 24px 0" />
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="#ffffff" padding="0 40px 32px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <!-- Footer -->
        <mj-section padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="12px" color="#94a3b8" padding="0">
              You're receiving this because you are registered as staff in Front Desk.
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def visitor_arrival_template(
    host_name: str,
    visitor_name: str,
    visitor_company: str,
    visitor_email: str,
    visitor_phone: str,
    reason_for_visit: Optional[str],
    check_in_time: str,
    accept_url: Optional[str] = None,
    decline_url: Optional[str] = None,
) -> str:
    """Visitor arrival notice with accept/decline action links"""
    actions = ""
    if accept_url and decline_url:
        actions = f"""
        <mj-text padding="16px 0 0 0">Will you see them now?</mj-text>
        {_button(accept_url, "Accept", THEME['success'])}
        {_button(decline_url, "Decline", THEME['danger'])}
        <mj-text font-size="13px" color="{THEME['text_muted']}">
          These links expire in 24 hours.
        </mj-text>
        """

    content = f"""
    <mj-text>Hi {escape(host_name)},</mj-text>
    <mj-text>
      <strong>{escape(visitor_name)}</strong> from {escape(visitor_company)} has checked in at reception to see you.
    </mj-text>
    {_detail_row("Email", visitor_email)}
    {_detail_row("Phone", visitor_phone)}
    {_detail_row("Reason", reason_for_visit)}
    {_detail_row("Checked in", check_in_time)}
    {actions}
    """

    return get_base_template(
        title="Your visitor has arrived",
        preview_text=f"{visitor_name} is here to see you",
        content_sections=content,
    )


def ticket_created_template(
    ticket_number: str,
    ticket_title: str,
    requester_name: str,
    priority: str,
    category: Optional[str],
    ticket_url: str,
) -> str:
    color = PRIORITY_COLORS.get(priority, THEME["primary"])
    content = f"""
    <mj-text>Hi {escape(requester_name)},</mj-text>
    <mj-text>
      We received your support request and the IT team has been notified.
    </mj-text>
    {_detail_row("Ticket", f"#{ticket_number}")}
    {_detail_row("Title", ticket_title)}
    <mj-text padding="4px 0">
      <strong>Priority:</strong> <span style="color: {color}; font-weight: 600;">{escape(priority)}</span>
    </mj-text>
    {_detail_row("Category", category)}
    """
    return get_base_template(
        title="Ticket created",
        preview_text=f"Ticket #{ticket_number} has been created",
        content_sections=content,
        cta_url=ticket_url,
        cta_label="View Ticket",
    )


def ticket_updated_template(
    ticket_number: str,
    ticket_title: str,
    old_status: str,
    new_status: str,
    updated_by: str,
    ticket_url: str,
) -> str:
    content = f"""
    <mj-text>
      The status of ticket <strong>#{escape(ticket_number)}</strong> ({escape(ticket_title)}) changed.
    </mj-text>
    <mj-text padding="4px 0">
      <span style="color: {THEME['text_muted']};">{escape(old_status)}</span> &rarr;
      <strong>{escape(new_status)}</strong>
    </mj-text>
    {_detail_row("Updated by", updated_by)}
    """
    return get_base_template(
        title="Ticket updated",
        preview_text=f"Ticket #{ticket_number} is now {new_status}",
        content_sections=content,
        cta_url=ticket_url,
        cta_label="View Ticket",
    )


def ticket_message_template(
    ticket_number: str,
    ticket_title: str,
    sender_name: str,
    message: str,
    ticket_url: str,
) -> str:
    preview = message[:200] + ("..." if len(message) > 200 else "")
    content = f"""
    <mj-text>
      <strong>{escape(sender_name)}</strong> replied on ticket #{escape(ticket_number)} ({escape(ticket_title)}):
    </mj-text>
    <mj-text padding="8px 16px" container-background-color="{THEME['background']}">
      {escape(preview)}
    </mj-text>
    """
    return get_base_template(
        title="New message on your ticket",
        preview_text=f"{sender_name} replied on #{ticket_number}",
        content_sections=content,
        cta_url=ticket_url,
        cta_label="View Conversation",
    )


def ticket_assigned_template(ticket_number: str, ticket_title: str, ticket_url: str) -> str:
    content = f"""
    <mj-text>A support ticket has been assigned to you.</mj-text>
    {_detail_row("Ticket", f"#{ticket_number} - {ticket_title}")}
    """
    return get_base_template(
        title="New ticket assignment",
        preview_text=f"Ticket #{ticket_number} was assigned to you",
        content_sections=content,
        cta_url=ticket_url,
        cta_label="View Ticket",
    )
