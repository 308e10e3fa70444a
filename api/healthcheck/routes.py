from fastapi import APIRouter, Depends

from config.settings import VERSION
from core.container import Container, get_container

router = APIRouter()


@router.get("")
def healthcheck(container: Container = Depends(get_container)):
    return {
        "status": "available",
        "system_info": {
            "environment": container.settings.environment,
            "version": VERSION,
        },
    }
