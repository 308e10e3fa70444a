from typing import Optional

from fastapi import APIRouter, Depends, Path, Response, status
from sqlmodel import Session

from api.movie.crud import SORT_COLUMNS, MovieStore, movie_conditions, validate_movie
from api.movie.schemas import MovieCreate, MovieListResponse, MovieResponse, MovieUpdate
from api.params import check_expected_version, expected_version, list_filters, split_csv
from auth.dependencies import AuthenticatedContext, require_permission
from core.pagination import Filters
from core.permissions import Permissions
from core.validator import Validator
from database.connection import get_session
from database.models import Movie
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=MovieListResponse)
def list_movies(
    title: str = "",
    genres: str = "",
    context: AuthenticatedContext = Depends(require_permission(Permissions.MOVIES_READ)),
    filters: Filters = Depends(list_filters(*SORT_COLUMNS)),
    session: Session = Depends(get_session),
):
    """List movies, optionally filtered by title substring and a comma-separated genre list."""
    conditions = movie_conditions(title, split_csv(genres))
    movies, metadata = MovieStore(session).get_all(filters, *conditions)
    return {"movies": movies, "metadata": metadata}


@router.post("", response_model=MovieResponse, status_code=status.HTTP_201_CREATED)
def create_movie(
    data: MovieCreate,
    response: Response,
    context: AuthenticatedContext = Depends(require_permission(Permissions.MOVIES_WRITE)),
    session: Session = Depends(get_session),
):
    movie = Movie(title=data.title, year=data.year, runtime=data.runtime, genres=data.genres)

    v = Validator()
    validate_movie(v, movie)
    v.raise_if_invalid()

    movie = MovieStore(session).insert(movie)
    logger.info(f"[Movies] Created movie {movie.id}")

    response.headers["Location"] = f"/v1/movies/{movie.id}"
    return movie


@router.get("/{movie_id}", response_model=MovieResponse)
def get_movie(
    movie_id: int = Path(...),
    context: AuthenticatedContext = Depends(require_permission(Permissions.MOVIES_READ)),
    session: Session = Depends(get_session),
):
    return MovieStore(session).get(movie_id)


@router.patch("/{movie_id}", response_model=MovieResponse)
def update_movie(
    data: MovieUpdate,
    movie_id: int = Path(...),
    expected: Optional[str] = Depends(expected_version),
    context: AuthenticatedContext = Depends(require_permission(Permissions.MOVIES_WRITE)),
    session: Session = Depends(get_session),
):
    """Partially update a movie. Concurrent writers are resolved by the record version."""
    store = MovieStore(session)
    movie = store.get(movie_id)
    check_expected_version(expected, movie)

    for field, value in data.model_dump(exclude_none=True).items():
        setattr(movie, field, value)

    v = Validator()
    validate_movie(v, movie)
    v.raise_if_invalid()

    return store.update(movie)


@router.delete("/{movie_id}")
def delete_movie(
    movie_id: int = Path(...),
    context: AuthenticatedContext = Depends(require_permission(Permissions.MOVIES_WRITE)),
    session: Session = Depends(get_session),
):
    MovieStore(session).delete(movie_id)
    logger.info(f"[Movies] Deleted movie {movie_id}")
    return {"message": "movie successfully deleted"}
