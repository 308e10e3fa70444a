from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import Request
from sqlalchemy.engine import Engine

from config.settings import Settings

if TYPE_CHECKING:
    from services.background import BackgroundRunner
    from services.mailer import Mailer


@dataclass
class Container:
    """Dependencies shared by every request, constructed once in main.create_app."""

    settings: Settings
    engine: Engine
    mailer: "Mailer"
    background: "BackgroundRunner"


def get_container(request: Request) -> Container:
    return request.app.state.container
