from django.apps import AppConfig


class MovieCatalogConfig(AppConfig):
    name = "movie_catalog"
    verbose_name = "Movie catalog"
    default_auto_field = "django.db.models.AutoField"
