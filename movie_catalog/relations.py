"""
Edge mutations between catalog rows, addressed by surrogate id.

The owning side of each relation holds the edges: `Movie` owns the director
foreign key and the genre/actor join tables, `Actor` owns the actor/director
join table. Changing an edge from the owning side is therefore all it takes to
keep both sides consistent; nothing is mirrored in memory.
"""

from __future__ import annotations

from typing import Iterable, Optional, Type

from django.db import transaction
from django.db.models import Model

from .exceptions import NotFound
from .models import Actor, Director, Genre, Movie
from .utils import unique_keep_order


def _get(model_cls: Type[Model], pk: int) -> Model:
    instance = model_cls._default_manager.select_for_update().filter(pk=pk).first()
    if instance is None:
        raise NotFound(f"{model_cls.__name__} not found with ID: {pk}")
    return instance


def require_ids(model_cls: Type[Model], ids: Iterable[int]) -> list:
    ids = unique_keep_order(ids)
    found = set(model_cls._default_manager.filter(pk__in=ids).values_list("pk", flat=True))
    missing = [pk for pk in ids if pk not in found]
    if missing:
        raise NotFound(
            f"{model_cls.__name__} not found with ID(s): {', '.join(str(pk) for pk in missing)}"
        )
    return ids


@transaction.atomic
def set_movie_director(movie_id: int, director_id: Optional[int]) -> Movie:
    """
    Point the movie at `director_id`, or at no director when it is `None`.
    The movie leaves the previous director's `movies` in the same write.
    """
    movie = _get(Movie, movie_id)
    if director_id is not None:
        _get(Director, director_id)
    movie.director_id = director_id
    movie.save(update_fields=["director"])
    return movie


@transaction.atomic
def add_movie_genres(movie_id: int, *genre_ids: int) -> None:
    movie = _get(Movie, movie_id)
    movie.genres.add(*require_ids(Genre, genre_ids))


@transaction.atomic
def remove_movie_genres(movie_id: int, *genre_ids: int) -> None:
    movie = _get(Movie, movie_id)
    movie.genres.remove(*unique_keep_order(genre_ids))


@transaction.atomic
def add_movie_actors(movie_id: int, *actor_ids: int) -> None:
    movie = _get(Movie, movie_id)
    movie.actors.add(*require_ids(Actor, actor_ids))


@transaction.atomic
def remove_movie_actors(movie_id: int, *actor_ids: int) -> None:
    movie = _get(Movie, movie_id)
    movie.actors.remove(*unique_keep_order(actor_ids))


@transaction.atomic
def add_actor_directors(actor_id: int, *director_ids: int) -> None:
    actor = _get(Actor, actor_id)
    actor.directors.add(*require_ids(Director, director_ids))


@transaction.atomic
def remove_actor_directors(actor_id: int, *director_ids: int) -> None:
    actor = _get(Actor, actor_id)
    actor.directors.remove(*unique_keep_order(director_ids))
