from rest_framework import serializers

from .dtos import (
    TMDBCastMember,
    TMDBCredits,
    TMDBCrewMember,
    TMDBGenre,
    TMDBMovie,
    TMDBPage,
)
from .models import MAX_AGE, MIN_AGE
from .utils import release_year_bounds

MIN_RATING = 0.0
MAX_RATING = 10.0


class BlankableDateField(serializers.DateField):
    """TMDB sends `""` for movies without a known release date."""

    def to_internal_value(self, value):
        if value == "":
            return None
        return super().to_internal_value(value)


# Catalog validation. Each serializer checks a DTO turned into a dict with
# `dataclasses.asdict`; unknown keys (read-only id sets) are ignored.


class MovieSerializer(serializers.Serializer):
    id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    external_id = serializers.IntegerField(required=False, allow_null=True)
    title = serializers.CharField(max_length=255)
    release_date = serializers.DateField(required=False, allow_null=True)
    original_language = serializers.CharField(
        max_length=8, required=False, allow_null=True, allow_blank=True
    )
    rating = serializers.FloatField(
        required=False, allow_null=True, min_value=MIN_RATING, max_value=MAX_RATING
    )
    director_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    genre_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)
    actor_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)

    def validate_release_date(self, value):
        if value is None:
            return value
        first_year, last_year = release_year_bounds(self.context.get("today"))
        if not first_year <= value.year <= last_year:
            raise serializers.ValidationError(
                f"Release year must be between {first_year} and {last_year}, got {value.year}."
            )
        return value


class PersonSerializer(serializers.Serializer):
    id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    external_id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(max_length=255)
    age = serializers.IntegerField(
        required=False, allow_null=True, min_value=MIN_AGE, max_value=MAX_AGE
    )


class ActorSerializer(PersonSerializer):
    pass


class DirectorSerializer(PersonSerializer):
    job = serializers.CharField(max_length=255, required=False, allow_null=True)


class GenreSerializer(serializers.Serializer):
    id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    external_id = serializers.IntegerField(required=False, allow_null=True)
    genre_name = serializers.CharField(max_length=255)


# TMDB decoding. `save()` hands back the matching record from `dtos`.


class TMDBGenreSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField(allow_blank=True)


class TMDBGenreListSerializer(serializers.Serializer):
    genres = TMDBGenreSerializer(many=True)

    def create(self, validated_data):
        return [TMDBGenre(**genre) for genre in validated_data["genres"]]


class TMDBMovieSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField(allow_blank=True)
    release_date = BlankableDateField(required=False, allow_null=True)
    original_language = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    vote_average = serializers.FloatField(source="rating", required=False, allow_null=True)
    genre_ids = serializers.ListField(child=serializers.IntegerField(), default=list)


class TMDBPageSerializer(serializers.Serializer):
    page = serializers.IntegerField()
    results = TMDBMovieSerializer(many=True, default=list)
    total_pages = serializers.IntegerField(required=False, allow_null=True)
    total_results = serializers.IntegerField(required=False, allow_null=True)

    def create(self, validated_data):
        results = [TMDBMovie(**movie) for movie in validated_data.pop("results")]
        return TMDBPage(results=results, **validated_data)


class TMDBCastSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    character = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    order = serializers.IntegerField(required=False, allow_null=True)


class TMDBCrewSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    job = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    department = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class TMDBCreditsSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    cast = TMDBCastSerializer(many=True, default=list)
    crew = TMDBCrewSerializer(many=True, default=list)

    def create(self, validated_data):
        return TMDBCredits(
            id=validated_data["id"],
            cast=[TMDBCastMember(**member) for member in validated_data["cast"]],
            crew=[TMDBCrewMember(**member) for member in validated_data["crew"]],
        )
