"""
Import of TMDB's movie listing into the catalog.

The sync pages through `/discover/movie` for one original language and a
release-date window ending today, and merges every result into local storage:

* genres are upserted by TMDB id before a movie is linked to them, so genre
  rows never depend on the order movies arrive in;
* a movie already stored (same TMDB id, or same title and release date) is
  skipped, or has its mutable fields overwritten when `update_existing` is set;
* any failure aborts the whole run with a `SyncError` naming the page, so an
  operator can resume from there.

Running the sync twice over an unchanged remote listing creates nothing the
second time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional

from .conf import get_setting
from .daos import ActorDAO, DirectorDAO, GenreDAO, MovieDAO
from .dtos import TMDBCastMember, TMDBCrewMember, TMDBMovie
from .exceptions import SyncError, TMDBError
from .models import Actor, Director, Genre, Movie
from .relations import add_actor_directors
from .tmdb import TMDBClient
from .utils import clamp_total_pages, release_window, unique_keep_order

logger = logging.getLogger(__name__)

UNKNOWN_GENRE_NAME = "Unknown"


@dataclass
class SyncResult:
    pages: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    genres_created: int = 0


class TMDBSync:
    def __init__(
        self,
        client: Optional[TMDBClient] = None,
        movie_dao: Optional[MovieDAO] = None,
        genre_dao: Optional[GenreDAO] = None,
        actor_dao: Optional[ActorDAO] = None,
        director_dao: Optional[DirectorDAO] = None,
        language: Optional[str] = None,
        window_years: Optional[int] = None,
        max_pages: Optional[int] = None,
        max_cast: Optional[int] = None,
        update_existing: bool = False,
        with_credits: bool = False,
    ):
        # TMDBClient() reads the API key and fails fast when it is missing
        self.client = client if client is not None else TMDBClient()
        self.movie_dao = movie_dao or MovieDAO()
        self.genre_dao = genre_dao or GenreDAO()
        self.actor_dao = actor_dao or ActorDAO()
        self.director_dao = director_dao or DirectorDAO()
        self.language = language or get_setting("SYNC_LANGUAGE")
        self.window_years = window_years or get_setting("SYNC_WINDOW_YEARS")
        self.max_pages = max_pages or get_setting("SYNC_MAX_PAGES")
        self.max_cast = max_cast if max_cast is not None else get_setting("SYNC_MAX_CAST")
        self.update_existing = update_existing
        self.with_credits = with_credits

    def fetch_genre_names(self) -> Dict[int, str]:
        """
        TMDB genre id -> display name. Only used to label genres seen for the
        first time, so a failure here degrades labels instead of aborting.
        """
        try:
            genres = self.client.get_genres()
        except TMDBError as exc:
            logger.warning(
                "Could not fetch the TMDB genre list, new genres will be labelled %(label)r: %(error)s",
                {"label": UNKNOWN_GENRE_NAME, "error": exc},
            )
            return {}
        return {genre.id: genre.name for genre in genres}

    def sync_genres(self) -> int:
        """Upsert the whole TMDB genre list by external id. Returns rows created."""
        created = 0
        for tmdb_genre in self.client.get_genres():
            genre = self.genre_dao.find_by_external_id(tmdb_genre.id)
            if genre is None:
                self.genre_dao.persist(Genre(external_id=tmdb_genre.id, genre_name=tmdb_genre.name))
                created += 1
                logger.info("Inserted new genre %(name)s", {"name": tmdb_genre.name})
            elif genre.genre_name != tmdb_genre.name:
                genre.genre_name = tmdb_genre.name
                self.genre_dao.update(genre)
                logger.info("Renamed genre %(pk)s to %(name)s", {"pk": genre.pk, "name": tmdb_genre.name})
        return created

    def sync_movies(self, today: Optional[date] = None) -> SyncResult:
        result = SyncResult()
        genre_names = self.fetch_genre_names()
        release_from, release_to = release_window(self.window_years, today)

        page = 1
        total_pages: Optional[int] = None
        while total_pages is None or page <= total_pages:
            try:
                response = self.client.discover_movies(
                    page=page,
                    language=self.language,
                    release_date_gte=release_from,
                    release_date_lte=release_to,
                )
                if not response.results:
                    logger.info("TMDB page %(page)s is empty, stopping", {"page": page})
                    break
                if total_pages is None:
                    total_pages = clamp_total_pages(response.total_pages, self.max_pages)
                    logger.info(
                        "Importing %(pages)s page(s) of %(language)s movies released %(start)s..%(end)s",
                        {
                            "pages": total_pages,
                            "language": self.language,
                            "start": release_from,
                            "end": release_to,
                        },
                    )
                for tmdb_movie in response.results:
                    self.import_movie(tmdb_movie, genre_names, result)
            except Exception as exc:
                raise SyncError(page, exc) from exc
            result.pages += 1
            page += 1

        logger.info(
            "TMDB sync finished: %(created)s created, %(updated)s updated, %(skipped)s skipped "
            "over %(pages)s page(s)",
            {
                "created": result.created,
                "updated": result.updated,
                "skipped": result.skipped,
                "pages": result.pages,
            },
        )
        return result

    def import_movie(
        self, tmdb_movie: TMDBMovie, genre_names: Dict[int, str], result: SyncResult
    ) -> Movie:
        genres = [
            self.get_or_create_genre(genre_id, genre_names, result)
            for genre_id in unique_keep_order(tmdb_movie.genre_ids)
        ]

        existing = self.find_existing(tmdb_movie)
        if existing is not None:
            if not self.update_existing:
                logger.debug(
                    "Skipping %(title)s, already stored as %(pk)s",
                    {"title": tmdb_movie.title, "pk": existing.pk},
                )
                result.skipped += 1
                return existing
            existing.title = tmdb_movie.title
            existing.release_date = tmdb_movie.release_date
            existing.original_language = tmdb_movie.original_language
            existing.rating = tmdb_movie.rating
            if existing.external_id is None:
                existing.external_id = tmdb_movie.id
            self.movie_dao.update(existing, genres=genres)
            result.updated += 1
            return existing

        # no surrogate id: the store assigns one
        movie = Movie(
            external_id=tmdb_movie.id,
            title=tmdb_movie.title,
            release_date=tmdb_movie.release_date,
            original_language=tmdb_movie.original_language,
            rating=tmdb_movie.rating,
        )
        self.movie_dao.persist(movie, genres=genres)
        result.created += 1
        if self.with_credits:
            self.import_credits(movie)
        return movie

    def find_existing(self, tmdb_movie: TMDBMovie) -> Optional[Movie]:
        existing = self.movie_dao.find_by_external_id(tmdb_movie.id)
        if existing is None:
            existing = self.movie_dao.find_by_title_and_release_date(
                tmdb_movie.title, tmdb_movie.release_date
            )
        return existing

    def get_or_create_genre(
        self, genre_id: int, genre_names: Dict[int, str], result: SyncResult
    ) -> Genre:
        genre = self.genre_dao.find_by_external_id(genre_id)
        if genre is None:
            genre = self.genre_dao.persist(
                Genre(external_id=genre_id, genre_name=genre_names.get(genre_id, UNKNOWN_GENRE_NAME))
            )
            result.genres_created += 1
        return genre

    def import_credits(self, movie: Movie) -> None:
        credits = self.client.get_credits(movie.external_id)
        cast = sorted(credits.cast, key=lambda member: member.order if member.order is not None else 9999)
        actors = [self.get_or_create_actor(member) for member in cast[: self.max_cast]]
        directors = credits.directors()
        director = self.get_or_create_director(directors[0]) if directors else None

        movie.director = director
        self.movie_dao.update(movie, actors=actors)
        if director is not None and actors:
            for actor in actors:
                add_actor_directors(actor.pk, director.pk)

    def get_or_create_actor(self, member: TMDBCastMember) -> Actor:
        actor = self.actor_dao.find_by_external_id(member.id)
        if actor is None:
            actor = self.actor_dao.persist(Actor(external_id=member.id, name=member.name))
        return actor

    def get_or_create_director(self, member: TMDBCrewMember) -> Director:
        director = self.director_dao.find_by_external_id(member.id)
        if director is None:
            director = self.director_dao.persist(
                Director(external_id=member.id, name=member.name, job=member.job or "Director")
            )
        return director
