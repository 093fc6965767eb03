from django.test import TestCase

from model_bakery import baker

from movie_catalog import relations
from movie_catalog.exceptions import NotFound
from movie_catalog.models import Actor, Director, Genre, Movie


class SetMovieDirectorTest(TestCase):
    def test_moves_movie_to_new_director(self):
        old_director = baker.make(Director)
        new_director = baker.make(Director)
        movie = baker.make(Movie, director=old_director)

        updated = relations.set_movie_director(movie.pk, new_director.pk)

        assert updated.director_id == new_director.pk
        assert not old_director.movies.exists()
        assert list(new_director.movies.all()) == [movie]

    def test_clears_director(self):
        director = baker.make(Director)
        movie = baker.make(Movie, director=director)

        relations.set_movie_director(movie.pk, None)

        movie.refresh_from_db()
        assert movie.director is None
        assert not director.movies.exists()

    def test_missing_director(self):
        movie = baker.make(Movie)

        with self.assertRaises(NotFound) as ctx:
            relations.set_movie_director(movie.pk, 999)

        assert "Director not found with ID: 999" in str(ctx.exception)
        movie.refresh_from_db()
        assert movie.director is None

    def test_missing_movie(self):
        with self.assertRaises(NotFound):
            relations.set_movie_director(999, None)


class MovieEdgesTest(TestCase):
    def setUp(self):
        super().setUp()
        self.movie = baker.make(Movie)
        self.genres = baker.make(Genre, _quantity=2)
        self.actors = baker.make(Actor, _quantity=2)

    def test_add_genres_is_idempotent(self):
        genre_ids = [genre.pk for genre in self.genres]

        relations.add_movie_genres(self.movie.pk, *genre_ids)
        relations.add_movie_genres(self.movie.pk, *genre_ids, genre_ids[0])

        assert set(self.movie.genres.values_list("pk", flat=True)) == set(genre_ids)
        assert list(self.genres[0].movies.all()) == [self.movie]

    def test_add_genres_rejects_missing_ids(self):
        with self.assertRaises(NotFound) as ctx:
            relations.add_movie_genres(self.movie.pk, self.genres[0].pk, 998, 999)

        assert "998, 999" in str(ctx.exception)
        assert not self.movie.genres.exists()

    def test_remove_absent_genre_is_noop(self):
        relations.add_movie_genres(self.movie.pk, self.genres[0].pk)

        relations.remove_movie_genres(self.movie.pk, self.genres[1].pk)
        relations.remove_movie_genres(self.movie.pk, self.genres[0].pk)

        assert not self.movie.genres.exists()

    def test_add_and_remove_actors(self):
        relations.add_movie_actors(self.movie.pk, *[actor.pk for actor in self.actors])
        relations.remove_movie_actors(self.movie.pk, self.actors[0].pk)

        assert list(self.movie.actors.all()) == [self.actors[1]]
        assert not self.actors[0].movies.exists()


class ActorDirectorEdgesTest(TestCase):
    def test_add_and_remove_directors(self):
        actor = baker.make(Actor)
        directors = baker.make(Director, _quantity=2)

        relations.add_actor_directors(actor.pk, *[director.pk for director in directors])
        relations.remove_actor_directors(actor.pk, directors[1].pk)

        assert list(actor.directors.all()) == [directors[0]]
        assert list(directors[0].actors.all()) == [actor]
        assert not directors[1].actors.exists()

    def test_missing_actor(self):
        director = baker.make(Director)

        with self.assertRaises(NotFound):
            relations.add_actor_directors(999, director.pk)
