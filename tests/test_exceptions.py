from rest_framework import status

from movie_catalog.exceptions import (
    AlreadyExists,
    BadRequest,
    Conflict,
    ErrorType,
    NotFound,
    ServerError,
    SyncError,
    TMDBRequestError,
)


def test_status_codes():
    assert BadRequest().status_code == status.HTTP_400_BAD_REQUEST
    assert NotFound().status_code == status.HTTP_404_NOT_FOUND
    assert Conflict().status_code == status.HTTP_409_CONFLICT
    assert AlreadyExists().status_code == status.HTTP_409_CONFLICT
    assert ServerError().status_code == status.HTTP_500_INTERNAL_SERVER_ERROR


def test_default_messages():
    assert str(NotFound()) == ErrorType.NOT_FOUND.message
    assert str(AlreadyExists()) == "Resource already exists"
    assert AlreadyExists().error_type.code == 409


def test_tmdb_error_is_server_error():
    error = TMDBRequestError("TMDB error 401", url="https://tmdb.test/3/x", status_code=401)

    assert isinstance(error, ServerError)
    assert error.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert error.http_status == 401
    assert error.url == "https://tmdb.test/3/x"


def test_sync_error_message():
    root = ConnectionError("reset by peer")
    try:
        try:
            raise root
        except ConnectionError as exc:
            raise TMDBRequestError("TMDB request failed") from exc
    except TMDBRequestError as exc:
        error = SyncError(3, exc)

    assert error.page == 3
    assert str(error) == (
        "Failed importing movies on page 3: TMDBRequestError - TMDB request failed"
        " | cause=ConnectionError: reset by peer"
    )
