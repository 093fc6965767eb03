from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

MIN_AGE = 0
MAX_AGE = 150


class CatalogModel(models.Model):
    # TMDB id; never doubles as the primary key
    external_id = models.IntegerField(unique=True, null=True, blank=True)

    class Meta:
        abstract = True


class Director(CatalogModel):
    name = models.CharField(max_length=255)
    age = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(MIN_AGE), MaxValueValidator(MAX_AGE)],
    )
    job = models.CharField(max_length=255, default="Director")

    class Meta:
        db_table = "directors"

    def __str__(self):
        return self.name


class Actor(CatalogModel):
    name = models.CharField(max_length=255)
    age = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(MIN_AGE), MaxValueValidator(MAX_AGE)],
    )
    directors = models.ManyToManyField(
        Director,
        db_table="actor_director",
        blank=True,
        related_name="actors",
    )

    class Meta:
        db_table = "actors"

    def __str__(self):
        return self.name


class Genre(CatalogModel):
    genre_name = models.CharField(max_length=255)

    class Meta:
        db_table = "genres"

    def __str__(self):
        return self.genre_name


class Movie(CatalogModel):
    title = models.CharField(max_length=255)
    release_date = models.DateField(null=True, blank=True)
    original_language = models.CharField(max_length=8, null=True, blank=True)
    rating = models.FloatField(null=True, blank=True)
    director = models.ForeignKey(
        Director,
        null=True,
        blank=True,
        related_name="movies",
        on_delete=models.PROTECT,
    )
    genres = models.ManyToManyField(
        Genre,
        db_table="movies_and_genres",
        blank=True,
        related_name="movies",
    )
    actors = models.ManyToManyField(
        Actor,
        db_table="movies_and_actors",
        blank=True,
        related_name="movies",
    )

    class Meta:
        db_table = "movies"
        indexes = [models.Index(fields=["title", "release_date"])]

    def __str__(self):
        return f"{self.title} ({self.release_date or 'unreleased'})"
