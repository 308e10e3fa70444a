from datetime import datetime

from sqlalchemy import String, cast

from core.validator import Validator, byte_length, unique
from database.models import Movie
from database.store import VersionedStore

SORT_COLUMNS = ("id", "title", "year", "runtime")


class MovieStore(VersionedStore[Movie]):
    model = Movie
    updatable_fields = ("title", "year", "runtime", "genres")


def validate_movie(v: Validator, movie: Movie) -> None:
    v.check(movie.title != "", "title", "must be provided")
    v.check(byte_length(movie.title) <= 500, "title", "must not be more than 500 bytes long")

    v.check(movie.year != 0, "year", "must be provided")
    v.check(movie.year >= 1888, "year", "must be greater than 1888")
    v.check(movie.year <= datetime.now().year, "year", "must not be in the future")

    v.check(movie.runtime != 0, "runtime", "must be provided")
    v.check(movie.runtime > 0, "runtime", "must be a positive integer")

    v.check(len(movie.genres) >= 1, "genres", "must contain at least 1 genre")
    v.check(len(movie.genres) <= 5, "genres", "must not contain more than 5 genres")
    v.check(unique(movie.genres), "genres", "must not contain duplicate values")


def movie_conditions(title: str = "", genres: list[str] | None = None) -> list:
    """WHERE clauses for the list filters. Empty filters match everything."""
    conditions = []
    if title:
        conditions.append(Movie.title.icontains(title, autoescape=True))

    # genres is a JSON array; match each quoted element in its text form
    genres_text = cast(Movie.genres, String)
    for genre in genres or []:
        conditions.append(genres_text.icontains(f'"{genre}"', autoescape=True))
    return conditions
