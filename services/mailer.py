import smtplib
from dataclasses import dataclass
from datetime import timedelta
from email.message import EmailMessage
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from config.settings import Settings
from utils.logger import get_logger

logger = get_logger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

# Every mail template defines these three blocks
TEMPLATE_BLOCKS = ("subject", "plain_body", "html_body")


def format_duration(duration: timedelta) -> str:
    """Human form of a token lifetime for mail bodies, e.g. "3 days" or "24 hours"."""
    seconds = int(duration.total_seconds())
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size and seconds % size == 0:
            count = seconds // size
            return f"{count} {unit}" + ("s" if count != 1 else "")
    return f"{seconds} seconds"


@dataclass
class RenderedMessage:
    subject: str
    plain_body: str
    html_body: str


class Mailer:
    """Renders Jinja2 mail templates and sends them over SMTP."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str,
        timeout: float = 5.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.timeout = timeout
        self.env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=select_autoescape(["html"]),
            undefined=StrictUndefined,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Mailer":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            sender=settings.smtp_sender,
        )

    def render(self, template_name: str, data: dict[str, Any]) -> RenderedMessage:
        template = self.env.get_template(template_name)
        parts = {}
        for block in TEMPLATE_BLOCKS:
            context = template.new_context(data)
            parts[block] = "".join(template.blocks[block](context)).strip()
        return RenderedMessage(**parts)

    def send(self, recipient: str, template_name: str, data: dict[str, Any]) -> None:
        rendered = self.render(template_name, data)

        message = EmailMessage()
        message["Subject"] = rendered.subject
        message["From"] = self.sender
        message["To"] = recipient
        message.set_content(rendered.plain_body)
        message.add_alternative(rendered.html_body, subtype="html")

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.username:
                smtp.starttls()
                smtp.login(self.username, self.password)
            smtp.send_message(message)

        logger.info(f"[Mailer] Sent '{template_name}' to user mailbox")
