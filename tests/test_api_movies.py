import pytest

WRITER_PERMISSIONS = ("movies:read", "movies:write")

MOANA = {"title": "Moana", "year": 2016, "runtime": "107 mins", "genres": ["animation", "adventure"]}


@pytest.fixture
def writer(create_user):
    _, headers = create_user(permissions=WRITER_PERMISSIONS)
    return headers


def create_movie(client, headers, **overrides):
    res = client.post("/v1/movies", headers=headers, json={**MOANA, **overrides})
    assert res.status_code == 201, res.text
    return res.json()


def test_create_and_get_movie(client, writer):
    res = client.post("/v1/movies", headers=writer, json=MOANA)

    assert res.status_code == 201
    movie = res.json()
    assert res.headers["Location"] == f"/v1/movies/{movie['id']}"
    assert movie == {
        "id": movie["id"],
        "title": "Moana",
        "year": 2016,
        "runtime": "107 mins",
        "genres": ["animation", "adventure"],
        "version": 1,
    }

    res = client.get(f"/v1/movies/{movie['id']}", headers=writer)
    assert res.status_code == 200
    assert res.json() == movie


def test_runtime_accepts_plain_minutes(client, writer):
    movie = create_movie(client, writer, runtime=95)
    assert movie["runtime"] == "95 mins"


def test_bad_runtime_format(client, writer):
    res = client.post("/v1/movies", headers=writer, json={**MOANA, "runtime": "107 minutes"})

    assert res.status_code == 422
    assert "runtime" in res.json()["error"]


def test_create_validation_errors(client, writer):
    res = client.post("/v1/movies", headers=writer, json={"title": "", "year": 1800, "genres": []})

    assert res.status_code == 422
    assert res.json() == {
        "error": {
            "title": "must be provided",
            "year": "must be greater than 1888",
            "runtime": "must be provided",
            "genres": "must contain at least 1 genre",
        }
    }


def test_read_only_user_cannot_write(client, create_user):
    _, headers = create_user()

    res = client.post("/v1/movies", headers=headers, json=MOANA)
    assert res.status_code == 403
    assert res.json() == {
        "error": "your user account doesn't have the necessary permissions to access this resource"
    }


def test_anonymous_user_is_rejected(client):
    res = client.get("/v1/movies")
    assert res.status_code == 401


def test_missing_and_malformed_ids(client, writer):
    assert client.get("/v1/movies/999", headers=writer).status_code == 404
    assert client.get("/v1/movies/0", headers=writer).status_code == 404

    res = client.get("/v1/movies/abc", headers=writer)
    assert res.status_code == 404
    assert res.json() == {"error": "the requested resource could not be found"}


def test_partial_update(client, writer):
    movie = create_movie(client, writer)

    res = client.patch(f"/v1/movies/{movie['id']}", headers=writer, json={"year": 2017})

    assert res.status_code == 200, res.text
    updated = res.json()
    assert updated["year"] == 2017
    assert updated["title"] == "Moana"
    assert updated["version"] == 2


def test_update_with_stale_expected_version_conflicts(client, writer):
    movie = create_movie(client, writer)
    client.patch(f"/v1/movies/{movie['id']}", headers=writer, json={"title": "Moana!"})

    res = client.patch(
        f"/v1/movies/{movie['id']}",
        headers={**writer, "X-Expected-Version": "1"},
        json={"title": "Moana?"},
    )

    assert res.status_code == 409
    assert res.json() == {
        "error": "unable to update the record due to an edit conflict, please try again"
    }
    assert client.get(f"/v1/movies/{movie['id']}", headers=writer).json()["title"] == "Moana!"


def test_update_validation(client, writer):
    movie = create_movie(client, writer)

    res = client.patch(f"/v1/movies/{movie['id']}", headers=writer, json={"genres": ["a", "a"]})

    assert res.status_code == 422
    assert res.json() == {"error": {"genres": "must not contain duplicate values"}}


def test_delete_movie(client, writer):
    movie = create_movie(client, writer)

    res = client.delete(f"/v1/movies/{movie['id']}", headers=writer)
    assert res.status_code == 200
    assert res.json() == {"message": "movie successfully deleted"}

    assert client.get(f"/v1/movies/{movie['id']}", headers=writer).status_code == 404
    assert client.delete(f"/v1/movies/{movie['id']}", headers=writer).status_code == 404


def test_list_with_filters_and_sorting(client, writer):
    create_movie(client, writer, title="The Breakfast Club", year=1985, genres=["comedy", "drama"])
    create_movie(client, writer, title="Black Panther", year=2018, genres=["action", "adventure"])
    create_movie(client, writer, title="Breakfast at Tiffany's", year=1961, genres=["comedy", "romance"])

    res = client.get("/v1/movies?title=breakfast&sort=-year", headers=writer)
    assert res.status_code == 200
    body = res.json()
    assert [m["title"] for m in body["movies"]] == ["The Breakfast Club", "Breakfast at Tiffany's"]
    assert body["metadata"] == {
        "current_page": 1,
        "page_size": 20,
        "first_page": 1,
        "last_page": 1,
        "total_records": 2,
    }

    res = client.get("/v1/movies?genres=comedy,drama", headers=writer)
    assert [m["title"] for m in res.json()["movies"]] == ["The Breakfast Club"]

    res = client.get("/v1/movies?genres=western", headers=writer)
    assert res.json()["movies"] == []
    assert res.json()["metadata"]["total_records"] == 0


def test_list_rejects_bad_filters(client, writer):
    res = client.get("/v1/movies?page=0&page_size=500&sort=rating", headers=writer)

    assert res.status_code == 422
    assert res.json() == {
        "error": {
            "page": "must be greater than zero",
            "page_size": "must be a maximum of 100",
            "sort": "invalid sort value",
        }
    }

    res = client.get("/v1/movies?page=abc", headers=writer)
    assert res.status_code == 422
    assert "page" in res.json()["error"]


def test_list_pagination(client, writer):
    for i in range(45):
        create_movie(client, writer, title=f"Movie {i:02d}")

    first = client.get("/v1/movies?page=1&page_size=20", headers=writer).json()
    assert len(first["movies"]) == 20
    assert first["metadata"]["last_page"] == 3
    assert first["metadata"]["total_records"] == 45

    past_end = client.get("/v1/movies?page=4&page_size=20", headers=writer).json()
    assert past_end["movies"] == []
    assert past_end["metadata"]["last_page"] == 3
    assert past_end["metadata"]["total_records"] == 45
