import pytest

from movie_catalog.conf import get_api_key, get_setting
from movie_catalog.exceptions import MissingAPIKey


def test_user_setting_overrides_default():
    assert get_setting("TMDB_BASE_URL") == "https://tmdb.test/3"


def test_default_setting():
    assert get_setting("SYNC_LANGUAGE") == "da"
    assert get_setting("SYNC_MAX_PAGES") == 500


def test_unknown_setting():
    with pytest.raises(KeyError):
        get_setting("NOT_A_SETTING")


def test_setting_from_django_settings(settings):
    settings.MOVIE_CATALOG = {"SYNC_LANGUAGE": "sv"}

    assert get_setting("SYNC_LANGUAGE") == "sv"
    assert get_setting("TMDB_API_KEY_ENV") == "API_KEY"


def test_api_key(monkeypatch):
    monkeypatch.setenv("MOVIE_CATALOG_TEST_API_KEY", " key ")

    assert get_api_key() == "key"


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("MOVIE_CATALOG_TEST_API_KEY", raising=False)

    with pytest.raises(MissingAPIKey, match="MOVIE_CATALOG_TEST_API_KEY"):
        get_api_key()
