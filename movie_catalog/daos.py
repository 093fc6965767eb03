"""
Data access objects, one per catalog model.

Every public method is its own unit of work: reads run on a fresh queryset and
are evaluated before returning, writes run inside their own `transaction.atomic`
block which rolls back and re-raises on failure. Nothing is shared between
calls, so an operation spanning two DAO calls is not atomic.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Generic, Iterable, List, Optional, Sequence, Type, TypeVar

from django.db import DEFAULT_DB_ALIAS, transaction
from django.db.models import Model, QuerySet

from .models import Actor, Director, Genre, Movie

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Model)


class BaseDAO(Generic[M]):
    model: Type[M]
    select_related: Sequence[str] = ()
    prefetch_related: Sequence[str] = ()

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def get_queryset(self) -> QuerySet:
        qs = self.model._default_manager.using(self.using)
        if self.select_related:
            qs = qs.select_related(*self.select_related)
        if self.prefetch_related:
            qs = qs.prefetch_related(*self.prefetch_related)
        return qs

    @contextmanager
    def unit_of_work(self, action: str, entity: Optional[Model] = None):
        try:
            with transaction.atomic(using=self.using):
                yield
        except Exception as exc:
            logger.warning(
                "Rolled back %(action)s of %(model)s %(pk)s: %(error)s",
                {
                    "action": action,
                    "model": self.model.__name__,
                    "pk": getattr(entity, "pk", None),
                    "error": exc,
                },
            )
            raise

    def _set_related(self, entity: M, related: Dict[str, Iterable[Any]]) -> None:
        for field_name, values in related.items():
            getattr(entity, field_name).set(list(values))

    def find_by_id(self, pk: Any) -> Optional[M]:
        return self.get_queryset().filter(pk=pk).first()

    def find_all(self) -> List[M]:
        return list(self.get_queryset())

    def persist(self, entity: M, **related: Iterable[Any]) -> M:
        """
        Insert `entity` as a new row. `related` maps many-to-many field names
        to the objects or ids the new row should be linked to.
        """
        with self.unit_of_work("persist", entity):
            entity.save(using=self.using, force_insert=True)
            self._set_related(entity, related)
        logger.debug(
            "Persisted %(model)s %(pk)s", {"model": self.model.__name__, "pk": entity.pk}
        )
        return entity

    def update(self, entity: M, **related: Iterable[Any]) -> M:
        """
        Replace every column of the existing row with `entity`'s values.
        Raises `DatabaseError` instead of inserting when the row is gone.
        """
        with self.unit_of_work("update", entity):
            entity.save(using=self.using, force_update=True)
            self._set_related(entity, related)
        logger.debug(
            "Updated %(model)s %(pk)s", {"model": self.model.__name__, "pk": entity.pk}
        )
        return entity

    def delete(self, entity: M) -> None:
        with self.unit_of_work("delete", entity):
            managed = (
                self.model._default_manager.using(self.using)
                .select_for_update()
                .filter(pk=entity.pk)
                .first()
            )
            if managed is None:
                logger.debug(
                    "Nothing to delete for %(model)s %(pk)s",
                    {"model": self.model.__name__, "pk": entity.pk},
                )
                return
            managed.delete()
        logger.debug("Deleted %(model)s %(pk)s", {"model": self.model.__name__, "pk": entity.pk})

    def find_by_external_id(self, external_id: int) -> Optional[M]:
        return self.get_queryset().filter(external_id=external_id).first()


class MovieDAO(BaseDAO[Movie]):
    model = Movie
    select_related = ("director",)
    prefetch_related = ("genres", "actors")

    def find_by_title(self, title: str) -> List[Movie]:
        return list(self.get_queryset().filter(title__icontains=title))

    def find_by_director_id(self, director_id: int) -> List[Movie]:
        return list(self.get_queryset().filter(director_id=director_id))

    def find_by_title_and_release_date(
        self, title: str, release_date: Optional[date]
    ) -> Optional[Movie]:
        # `release_date=None` becomes an IS NULL lookup
        return self.get_queryset().filter(title=title, release_date=release_date).first()


class GenreDAO(BaseDAO[Genre]):
    model = Genre
    prefetch_related = ("movies",)

    def find_by_genre_name(self, genre_name: str) -> Optional[Genre]:
        return self.get_queryset().filter(genre_name=genre_name).first()

    def find_by_genre_name_containing(self, genre_name: str) -> List[Genre]:
        # `icontains`, so the match is case-insensitive on every backend
        return list(self.get_queryset().filter(genre_name__icontains=genre_name))


class ActorDAO(BaseDAO[Actor]):
    model = Actor
    prefetch_related = ("directors", "movies")

    def find_by_name_containing(self, name: str) -> List[Actor]:
        return list(self.get_queryset().filter(name__icontains=name))


class DirectorDAO(BaseDAO[Director]):
    model = Director
    prefetch_related = ("actors", "movies")

    def find_by_name_containing(self, name: str) -> List[Director]:
        return list(self.get_queryset().filter(name__icontains=name))
