# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Category templates for email and SMS content.

Each notification category owns one email template (subject, HTML body,
plain-text body) and one SMS template. Templates use two kinds of tokens:

- ``{{key}}`` is replaced with ``data[key]``. A key that is missing or None
  leaves the token verbatim so a missing field degrades the content rather
  than blocking delivery.
- ``{{#if key}}...{{/if}}`` keeps its inner text only when ``data[key]`` is
  truthy.

Unknown categories resolve to the system template.
"""

import html
import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping

from src.infrastructure.notifications.models import NotificationCategory, coerce_category

logger = logging.getLogger(__name__)

_CONDITIONAL_PATTERN = re.compile(r"\{\{#if (\w+)\}\}(.*?)\{\{/if\}\}", re.DOTALL)
_PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")

BRAND_NAME = "Panda Mart Kenya"
SUPPORT_EMAIL = "support@pandamart.co.ke"


@dataclass(frozen=True)
class EmailTemplate:
    """Email content skeleton."""

    subject: str
    html: str
    text: str


@dataclass(frozen=True)
class SMSTemplate:
    """SMS content skeleton."""

    message: str


@dataclass(frozen=True)
class CategoryTemplates:
    """Email and SMS templates for one category."""

    email: EmailTemplate
    sms: SMSTemplate


def render(template: str, data: Mapping[str, Any], escape_html: bool = False) -> str:
    """Substitute placeholders in a template string.

    Args:
        template: Template text with ``{{key}}`` and ``{{#if key}}`` tokens.
        data: Placeholder values.
        escape_html: HTML-escape substituted values.

    Returns:
        Rendered text. Unmatched placeholders are left verbatim.
    """
    if "{{" not in template:
        return template

    def _conditional(match: re.Match[str]) -> str:
        return match.group(2) if data.get(match.group(1)) else ""

    def _placeholder(match: re.Match[str]) -> str:
        value = data.get(match.group(1))
        if value is None:
            return match.group(0)
        text = str(value)
        return html.escape(text) if escape_html else text

    rendered = _CONDITIONAL_PATTERN.sub(_conditional, template)
    return _PLACEHOLDER_PATTERN.sub(_placeholder, rendered)


def _email_html(
    heading: str,
    gradient: str,
    accent: str,
    action_label: str | None,
    notice: str = "",
    heading_color: str = "white",
    button_text_color: str = "white",
) -> str:
    action_button = ""
    if action_label:
        action_button = (
            "{{#if action_url}}"
            f'<a href="{{{{action_url}}}}" style="background: {accent}; '
            f"color: {button_text_color}; padding: 12px 24px; text-decoration: none; "
            f'border-radius: 5px; display: inline-block; margin-top: 15px;">'
            f"{action_label}</a>"
            "{{/if}}"
        )

    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <div style="background: linear-gradient(135deg, {gradient}); padding: 20px; text-align: center;">
        <h1 style="color: {heading_color}; margin: 0;">{heading}</h1>
    </div>
    <div style="padding: 20px;">
        <h2>{{{{title}}}}</h2>
        <p>{{{{body}}}}</p>
        {notice}
        {action_button}
    </div>
    <div style="background: #f8f9fa; padding: 15px; text-align: center; font-size: 12px; color: #666;">
        <p>{BRAND_NAME} | Your World of Amazing Deals</p>
        <p>If you have any questions, contact us at {SUPPORT_EMAIL}</p>
    </div>
</div>
""".strip()


def _email_text(action_label: str | None, notice: str = "") -> str:
    parts = ["{{title}}", "", "{{body}}", ""]
    if notice:
        parts.extend([notice, ""])
    if action_label:
        parts.extend([f"{{{{#if action_url}}}}{action_label}: {{{{action_url}}}}{{{{/if}}}}", ""])
    parts.append(BRAND_NAME)
    return "\n".join(parts)


_SECURITY_NOTICE = "If this wasn't you, please secure your account immediately."
_SECURITY_SMS_NOTICE = "If this wasn't you, secure your account immediately."

_TEMPLATES: dict[NotificationCategory, CategoryTemplates] = {
    NotificationCategory.ORDER: CategoryTemplates(
        email=EmailTemplate(
            subject="Order Update - {{title}}",
            html=_email_html("Panda Mart Kenya", "#FF6B35, #F7931E", "#FF6B35", "View Order Details"),
            text=_email_text("View details"),
        ),
        sms=SMSTemplate(
            message="Panda Mart: {{title}}. {{body}}{{#if action_url}} Details: {{action_url}}{{/if}}",
        ),
    ),
    NotificationCategory.PAYMENT: CategoryTemplates(
        email=EmailTemplate(
            subject="Payment Confirmation - Panda Mart",
            html=_email_html("Payment Confirmed", "#28a745, #20c997", "#28a745", "View Receipt"),
            text=_email_text("View receipt"),
        ),
        sms=SMSTemplate(message="Panda Mart: Payment confirmed. {{body}}"),
    ),
    NotificationCategory.LOYALTY: CategoryTemplates(
        email=EmailTemplate(
            subject="Panda Points Update",
            html=_email_html(
                "Panda Points",
                "#ffd700, #ffed4e",
                "#ffd700",
                "View Loyalty Dashboard",
                heading_color="#333",
                button_text_color="#333",
            ),
            text=_email_text("View dashboard"),
        ),
        sms=SMSTemplate(message="Panda Mart: {{title}}. {{body}}"),
    ),
    NotificationCategory.SECURITY: CategoryTemplates(
        email=EmailTemplate(
            subject="Security Alert - Panda Mart Account",
            html=_email_html(
                "Security Alert",
                "#dc3545, #e74c3c",
                "#dc3545",
                "Secure Account",
                notice=f'<p style="color: #dc3545; font-weight: bold;">{_SECURITY_NOTICE}</p>',
            ),
            text=_email_text("Secure account", notice=_SECURITY_NOTICE),
        ),
        sms=SMSTemplate(
            message=f"Panda Mart Security: {{{{body}}}} {_SECURITY_SMS_NOTICE}",
        ),
    ),
    NotificationCategory.PROMOTION: CategoryTemplates(
        email=EmailTemplate(
            subject="Special Offer - Panda Mart",
            html=_email_html("Special Offer", "#e91e63, #f06292", "#e91e63", "Shop Now"),
            text=_email_text("Shop now"),
        ),
        sms=SMSTemplate(
            message="Panda Mart Offer: {{body}}{{#if action_url}} Shop: {{action_url}}{{/if}}",
        ),
    ),
    NotificationCategory.SYSTEM: CategoryTemplates(
        email=EmailTemplate(
            subject="System Update - Panda Mart",
            html=_email_html("System Update", "#6c757d, #adb5bd", "#6c757d", None),
            text=_email_text(None),
        ),
        sms=SMSTemplate(message="Panda Mart: {{body}}"),
    ),
    NotificationCategory.COMMUNITY: CategoryTemplates(
        email=EmailTemplate(
            subject="Community Update - Panda Mart",
            html=_email_html("Community", "#17a2b8, #20c997", "#17a2b8", "View Community"),
            text=_email_text("View community"),
        ),
        sms=SMSTemplate(message="Panda Mart Community: {{body}}"),
    ),
}


class TemplateRegistry:
    """Maps notification categories to channel-specific templates.

    The default registry covers every NotificationCategory. A custom
    mapping can be passed in to override individual categories; missing
    entries fall back to the system template.
    """

    FALLBACK_CATEGORY = NotificationCategory.SYSTEM

    def __init__(
        self,
        templates: Mapping[NotificationCategory, CategoryTemplates] | None = None,
    ) -> None:
        self._templates: dict[NotificationCategory, CategoryTemplates] = dict(_TEMPLATES)
        if templates:
            self._templates.update(templates)

    def resolve(self, category: NotificationCategory | str) -> CategoryTemplates:
        """Return the templates for a category, falling back to system.

        Args:
            category: Category enum member or raw name.

        Returns:
            The category's templates. Never raises.
        """
        resolved = coerce_category(category)
        templates = (
            self._templates.get(resolved)
            if isinstance(resolved, NotificationCategory)
            else None
        )
        if templates is None:
            logger.warning(
                "No templates for notification category %r, using %s",
                category,
                self.FALLBACK_CATEGORY.value,
            )
            return self._templates[self.FALLBACK_CATEGORY]
        return templates

    def render_email(
        self,
        template: EmailTemplate,
        data: Mapping[str, Any],
        escape_html: bool = True,
    ) -> EmailTemplate:
        """Render all three parts of an email template.

        Args:
            template: Email template to render.
            data: Placeholder values.
            escape_html: HTML-escape values substituted into the HTML body.

        Returns:
            A new EmailTemplate holding rendered content.
        """
        return EmailTemplate(
            subject=render(template.subject, data),
            html=render(template.html, data, escape_html=escape_html),
            text=render(template.text, data),
        )

    def render_sms(self, template: SMSTemplate, data: Mapping[str, Any]) -> str:
        """Render an SMS template to its message text."""
        return render(template.message, data)
