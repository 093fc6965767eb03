from django.test import TestCase

from model_bakery import baker
from rest_framework import status

from movie_catalog.dtos import GenreDTO
from movie_catalog.exceptions import AlreadyExists, BadRequest, Conflict, NotFound
from movie_catalog.models import Genre, Movie
from movie_catalog.services import GenreService


class GenreServiceTest(TestCase):
    def setUp(self):
        super().setUp()
        self.service = GenreService()

    def test_save(self):
        saved = self.service.save(GenreDTO(genre_name="Drama", external_id=18))

        assert saved == GenreDTO(id=saved.id, external_id=18, genre_name="Drama")

    def test_save_duplicate_name(self):
        baker.make(Genre, genre_name="Drama")

        with self.assertRaises(AlreadyExists) as ctx:
            self.service.save(GenreDTO(genre_name="Drama"))

        assert ctx.exception.status_code == status.HTTP_409_CONFLICT
        assert isinstance(ctx.exception, Conflict)
        assert Genre.objects.count() == 1

    def test_save_blank_name(self):
        with self.assertRaises(BadRequest):
            self.service.save(GenreDTO(genre_name=" "))

    def test_find_by_name(self):
        genre = baker.make(Genre, genre_name="Drama")

        assert self.service.find_by_name("Drama").id == genre.pk

    def test_find_by_name_missing(self):
        baker.make(Genre, genre_name="Drama")

        with self.assertRaises(NotFound) as ctx:
            self.service.find_by_name("drama")

        assert "Genre not found with name: drama" in str(ctx.exception)

    def test_search_by_name(self):
        comedy = baker.make(Genre, genre_name="Comedy")
        romcom = baker.make(Genre, genre_name="Romantic comedy")
        baker.make(Genre, genre_name="Drama")

        found = {dto.id for dto in self.service.search_by_name("COMEDY")}

        assert found == {comedy.pk, romcom.pk}

    def test_get_movie_titles(self):
        genre = baker.make(Genre)
        baker.make(Movie, title="Festen", genres=[genre])
        baker.make(Movie, title="Jagten", genres=[genre])
        baker.make(Movie, title="Unrelated")

        assert sorted(self.service.get_movie_titles(genre.pk)) == ["Festen", "Jagten"]

    def test_get_movie_titles_missing_genre(self):
        with self.assertRaises(NotFound):
            self.service.get_movie_titles(999)

    def test_delete_genre_with_movies_is_conflict(self):
        genre = baker.make(Genre)
        movie = baker.make(Movie, genres=[genre])

        with self.assertRaises(Conflict) as ctx:
            self.service.delete(genre.pk)

        assert f"Cannot delete genre with ID {genre.pk}" in str(ctx.exception)
        assert list(movie.genres.all()) == [genre]

    def test_delete_unused_genre(self):
        genre = baker.make(Genre)

        self.service.delete(genre.pk)

        assert not Genre.objects.exists()

    def test_update_renames(self):
        genre = baker.make(Genre, genre_name="Sci-Fi")

        updated = self.service.update(GenreDTO(id=genre.pk, genre_name="Science Fiction"))

        assert updated.genre_name == "Science Fiction"

    def test_update_external_id_taken_by_other_genre(self):
        baker.make(Genre, external_id=18)
        genre = baker.make(Genre, external_id=None)

        with self.assertRaises(Conflict):
            self.service.update(GenreDTO(id=genre.pk, genre_name="Drama", external_id=18))

    def test_save_name_differing_only_by_padding(self):
        self.service.save(GenreDTO(genre_name="Drama"))

        with self.assertRaises(AlreadyExists):
            self.service.save(GenreDTO(genre_name="Drama "))

        assert list(Genre.objects.values_list("genre_name", flat=True)) == ["Drama"]

    def test_save_stores_trimmed_name(self):
        saved = self.service.save(GenreDTO(genre_name="  Thriller "))

        assert saved.genre_name == "Thriller"
        assert self.service.find_by_name("Thriller").id == saved.id

    def test_update_to_name_of_other_genre(self):
        baker.make(Genre, genre_name="Drama")
        comedy = baker.make(Genre, genre_name="Comedy")

        with self.assertRaises(AlreadyExists):
            self.service.update(GenreDTO(id=comedy.pk, genre_name="Drama"))

        comedy.refresh_from_db()
        assert comedy.genre_name == "Comedy"

    def test_update_keeping_own_name(self):
        genre = baker.make(Genre, genre_name="Drama")

        updated = self.service.update(GenreDTO(id=genre.pk, genre_name="Drama", external_id=18))

        assert updated.external_id == 18
