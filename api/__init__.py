from fastapi import APIRouter

from api.healthcheck.routes import router as healthcheck_router
from api.user.routes import router as user_router
from api.token.routes import router as token_router
from api.movie.routes import router as movie_router
from api.module.routes import router as module_router
from api.department.routes import router as department_router

api_router = APIRouter()

api_router.include_router(healthcheck_router, prefix="/healthcheck", tags=["healthcheck"])
api_router.include_router(user_router, prefix="/users", tags=["users"])
api_router.include_router(token_router, prefix="/tokens", tags=["tokens"])
api_router.include_router(movie_router, prefix="/movies", tags=["movies"])
api_router.include_router(module_router, prefix="/modules", tags=["modules"])
api_router.include_router(department_router, prefix="/departments", tags=["departments"])
