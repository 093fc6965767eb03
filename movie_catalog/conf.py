"""
Settings for movie_catalog, read from the `MOVIE_CATALOG` dict in Django settings.

    MOVIE_CATALOG = {
        "SYNC_LANGUAGE": "da",
        "SYNC_MAX_PAGES": 50,
    }

Any key left out falls back to `DEFAULTS`.
"""
import os

from django.conf import settings

from .exceptions import MissingAPIKey

DEFAULTS = {
    "TMDB_BASE_URL": "https://api.themoviedb.org/3",
    "TMDB_API_KEY_ENV": "API_KEY",
    "TMDB_TIMEOUT": None,
    "GENRE_LANGUAGE": "en",
    "SYNC_LANGUAGE": "da",
    "SYNC_WINDOW_YEARS": 5,
    # TMDB refuses to serve discover pages beyond 500
    "SYNC_MAX_PAGES": 500,
    "SYNC_MAX_CAST": 10,
}


def get_setting(name):
    if name not in DEFAULTS:
        raise KeyError(f"Unknown movie_catalog setting: {name}")
    user_settings = getattr(settings, "MOVIE_CATALOG", None) or {}
    return user_settings.get(name, DEFAULTS[name])


def get_api_key() -> str:
    env_var = get_setting("TMDB_API_KEY_ENV")
    api_key = os.environ.get(env_var, "").strip()
    if not api_key:
        raise MissingAPIKey(f"{env_var} environment variable is not set")
    return api_key
