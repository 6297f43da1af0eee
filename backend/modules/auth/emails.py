"""HTML bodies for account mail."""

from html import escape

_BUTTON_STYLE = (
    "display: inline-block; background-color: #4285f4; color: white; "
    "padding: 10px 20px; text-decoration: none; border-radius: 4px; margin: 15px 0;"
)

ACTIVATION_SUBJECT = "Activate Your LinkUni Account"
PASSWORD_RESET_SUBJECT = "Password Reset Request"


def _minutes(seconds: int) -> str:
    minutes = max(1, seconds // 60)
    return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"


def _layout(heading: str, intro: str, link: str, button: str, footer: str, ttl_seconds: int) -> str:
    link = escape(link, quote=True)
    return (
        "<div style='font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;'>"
        f"<h2 style='color: #4a4a4a;'>{heading}</h2>"
        f"{intro}"
        f"<a href='{link}' style='{_BUTTON_STYLE}'>{button}</a>"
        "<p>If the button doesn't work, you can copy and paste the following link "
        "into your browser:</p>"
        f"<p><a href='{link}'>{link}</a></p>"
        f"<p>This link will expire in {_minutes(ttl_seconds)}.</p>"
        f"<p>{footer}</p>"
        "<p>Best regards,<br>The LinkUni Team</p>"
        "</div>"
    )


def activation_email(link: str, ttl_seconds: int) -> str:
    return _layout(
        heading="Welcome to LinkUni!",
        intro="<p>Thank you for signing up. Please click the button below to "
        "activate your account:</p>",
        link=link,
        button="Activate Account",
        footer="If you didn't sign up for a LinkUni account, you can safely ignore this email.",
        ttl_seconds=ttl_seconds,
    )


def password_reset_email(first_name: str, link: str, ttl_seconds: int) -> str:
    return _layout(
        heading=f"Hello {escape(first_name)}!",
        intro="<p>We received a request to reset the password for your LinkUni account.</p>"
        "<p>Click the button below to reset your password:</p>",
        link=link,
        button="Reset Password",
        footer="If you didn't request a password reset, you can safely ignore this email.",
        ttl_seconds=ttl_seconds,
    )
