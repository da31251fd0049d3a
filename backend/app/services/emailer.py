import logging
import smtplib
from email.message import EmailMessage

from .. import config

logger = logging.getLogger(__name__)


def smtp_configured() -> bool:
    return bool(config.SMTP_HOST and config.SMTP_USER and config.SMTP_PASS and config.SMTP_FROM)


def send_password_reset_email(*, to_email: str, full_name: str | None, code: str, ttl_minutes: int) -> None:
    """
    Sends the password reset OTP using SMTP (Gmail App Password recommended).

    Env vars:
      SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS, SMTP_FROM, SMTP_TLS
    """
    if not smtp_configured():
        raise RuntimeError("SMTP is not configured (missing SMTP_HOST/SMTP_USER/SMTP_PASS/SMTP_FROM).")

    name = (full_name or "there").strip()

    lines: list[str] = []
    lines.append(f"Hi {name},")
    lines.append("")
    lines.append("We received a request to reset your JobPortal password.")
    lines.append("")
    lines.append(f"Your one-time code is: {code}")
    lines.append(f"It expires in {ttl_minutes} minutes.")
    lines.append("")
    lines.append("If you did not request this, you can ignore this email.")
    lines.append("")
    lines.append("Best regards,")
    lines.append("JobPortal")

    msg = EmailMessage()
    msg["Subject"] = "Your JobPortal password reset code"
    msg["From"] = config.SMTP_FROM
    msg["To"] = to_email
    msg.set_content("\n".join(lines))

    logger.info("Sending password reset email to %s via %s:%s", to_email, config.SMTP_HOST, config.SMTP_PORT)
    with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=15) as smtp:
        smtp.ehlo()
        if config.SMTP_TLS:
            smtp.starttls()
            smtp.ehlo()
        smtp.login(config.SMTP_USER, config.SMTP_PASS)
        smtp.send_message(msg)
