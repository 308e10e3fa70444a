from services.background import BackgroundRunner
from services.mailer import Mailer, RenderedMessage, format_duration

__all__ = [
    "BackgroundRunner",
    "Mailer",
    "RenderedMessage",
    "format_duration",
]
