import logging

import pytest
from sqlalchemy import update
from sqlalchemy.exc import OperationalError

from api import errors
from api.errors import SERVER_ERROR_MESSAGE
from api.movie.crud import MovieStore
from database.models import User
from database.store import storage_errors


@pytest.fixture
def error_log(caplog, monkeypatch):
    # Application loggers do not propagate; let caplog see the error handler
    monkeypatch.setattr(errors.logger, "propagate", True)
    caplog.set_level(logging.ERROR, logger=errors.logger.name)
    return caplog


def test_query_timeout_is_an_opaque_500_and_logged(client, create_user, monkeypatch, error_log):
    def timed_out(self, filters, *conditions):
        with storage_errors(self.session):
            raise OperationalError("SELECT movies", {}, Exception("canceling statement due to statement timeout"))

    monkeypatch.setattr(MovieStore, "get_all", timed_out)
    _, headers = create_user()

    res = client.get("/v1/movies", headers=headers)

    assert res.status_code == 500
    assert res.json() == {"error": SERVER_ERROR_MESSAGE}
    assert "statement timeout" not in res.text

    [record] = [r for r in error_log.records if r.name == errors.logger.name]
    assert record.levelno == logging.ERROR
    assert "GET /v1/movies" in record.getMessage()
    assert "StorageTimeoutError" in record.getMessage()


def test_storage_failure_on_write_is_an_opaque_500(client, create_user, monkeypatch, error_log):
    def broken_insert(self, record):
        with storage_errors(self.session):
            raise OperationalError("INSERT INTO movies", {}, Exception("disk I/O error"))

    monkeypatch.setattr(MovieStore, "insert", broken_insert)
    _, headers = create_user(permissions=("movies:read", "movies:write"))

    res = client.post(
        "/v1/movies",
        headers=headers,
        json={"title": "Moana", "year": 2016, "runtime": "107 mins", "genres": ["animation"]},
    )

    assert res.status_code == 500
    assert res.json() == {"error": SERVER_ERROR_MESSAGE}
    assert "disk I/O error" not in res.text
    assert "POST /v1/movies" in error_log.text


def test_hashing_failure_is_an_opaque_500(client, create_user, session, error_log):
    user, _ = create_user(email="carol@example.com")
    session.execute(update(User).where(User.id == user.id).values(password_hash="not-a-bcrypt-hash"))
    session.commit()

    res = client.post(
        "/v1/tokens/authentication",
        json={"email": "carol@example.com", "password": "pa55word1234"},
    )

    assert res.status_code == 500
    assert res.json() == {"error": SERVER_ERROR_MESSAGE}
    assert "HashingError" in error_log.text
