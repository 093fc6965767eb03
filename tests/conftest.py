import django
from django.conf import settings


def pytest_configure(*args):
    settings.configure(
        DEBUG_PROPAGATE_EXCEPTIONS=True,
        DATABASES={
            "default": {
                "ENGINE": "django.db.backends.sqlite3",
                "NAME": ":memory:",
            },
        },
        SECRET_KEY="not very secret in tests",
        INSTALLED_APPS=(
            "django.contrib.contenttypes",
            "rest_framework",
            "movie_catalog",
        ),
        DEFAULT_AUTO_FIELD="django.db.models.AutoField",
        USE_TZ=True,
        MOVIE_CATALOG={
            "TMDB_BASE_URL": "https://tmdb.test/3",
            "TMDB_API_KEY_ENV": "MOVIE_CATALOG_TEST_API_KEY",
        },
    )

    django.setup()
