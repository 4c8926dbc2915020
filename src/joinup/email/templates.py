"""
Email templates for JoinUP.

All templates use inline CSS for maximum email client compatibility.
Each template function returns (subject, html_body, text_body).
"""

from __future__ import annotations

from html import escape

# Color constants
BG_PAGE = "#F4F6FB"
BG_CARD = "#FFFFFF"
ACCENT = "#4F46E5"
TEXT_PRIMARY = "#111827"
TEXT_SECONDARY = "#4B5563"
BORDER = "#E5E7EB"


def _base_layout(content: str, app_name: str = "JoinUP") -> str:
    """Wrap content in the base email layout."""
    return f"""\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{app_name}</title>
</head>
<body style="margin: 0; padding: 0; background-color: {BG_PAGE}; font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;">
    <table role="presentation" cellspacing="0" cellpadding="0" border="0" width="100%" style="background-color: {BG_PAGE};">
        <tr>
            <td align="center" style="padding: 40px 20px;">
                <table role="presentation" cellspacing="0" cellpadding="0" border="0" width="600" style="max-width: 600px; width: 100%;">
                    <tr>
                        <td align="center" style="padding-bottom: 24px;">
                            <span style="font-size: 24px; font-weight: 700; color: {ACCENT};">{app_name}</span>
                        </td>
                    </tr>
                    <tr>
                        <td style="background-color: {BG_CARD}; border: 1px solid {BORDER}; border-radius: 12px; padding: 40px 32px;">
                            {content}
                        </td>
                    </tr>
                    <tr>
                        <td align="center" style="padding-top: 24px;">
                            <p style="color: {TEXT_SECONDARY}; font-size: 12px; line-height: 1.5; margin: 0;">
                                You are receiving this because you compete on {app_name}.
                            </p>
                        </td>
                    </tr>
                </table>
            </td>
        </tr>
    </table>
</body>
</html>"""


def _button(url: str, label: str) -> str:
    """Render an accent-colored CTA button."""
    return f"""\
<table role="presentation" cellspacing="0" cellpadding="0" border="0" style="margin: 28px auto;">
    <tr>
        <td align="center" style="background-color: {ACCENT}; border-radius: 8px;">
            <a href="{url}" target="_blank" style="display: inline-block; padding: 14px 32px; color: #FFFFFF; font-size: 16px; font-weight: 600; text-decoration: none; border-radius: 8px;">
                {label}
            </a>
        </td>
    </tr>
</table>"""


def level_up_email(
    user_name: str | None,
    old_level: int,
    new_level: int,
    level_name: str,
    total_points: int,
    profile_url: str,
) -> tuple[str, str, str]:
    """
    Sent when a point award crosses a level threshold.

    Returns:
        (subject, html_body, text_body)
    """
    name = escape(user_name or "there")
    title = escape(level_name)
    subject = f"Level Up! You're now {level_name}!"
    content = f"""\
<h1 style="color: {TEXT_PRIMARY}; font-size: 24px; font-weight: 700; margin: 0 0 16px 0;">Level {new_level}: {title}</h1>
<p style="color: {TEXT_SECONDARY}; font-size: 16px; line-height: 1.6; margin: 0 0 8px 0;">Hi {name},</p>
<p style="color: {TEXT_SECONDARY}; font-size: 16px; line-height: 1.6; margin: 0 0 24px 0;">
    You just moved from level {old_level} to level {new_level} and earned the title
    <strong style="color: {TEXT_PRIMARY};">{title}</strong>.
    You now have <strong style="color: {TEXT_PRIMARY};">{total_points:,} points</strong>.
</p>
{_button(profile_url, "View Your Progress")}"""
    html_body = _base_layout(content)
    text_body = (
        f"Hi {user_name or 'there'},\n\n"
        f"Congratulations! You moved from level {old_level} to level {new_level} "
        f'and earned the title "{level_name}".\n'
        f"Total points: {total_points:,}\n\n"
        f"See your progress: {profile_url}\n\n"
        f"-- The JoinUP Team"
    )
    return subject, html_body, text_body
