from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import asdict, fields, replace
from datetime import date
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from django.db import IntegrityError
from django.db.models import Model

from rest_framework.serializers import Serializer

from . import relations
from .daos import ActorDAO, BaseDAO, DirectorDAO, GenreDAO, MovieDAO
from .dtos import ActorDTO, DirectorDTO, GenreDTO, MovieDTO
from .exceptions import AlreadyExists, BadRequest, CatalogError, Conflict, NotFound, ServerError
from .models import Actor, Director, Genre, Movie
from .serializers import ActorSerializer, DirectorSerializer, GenreSerializer, MovieSerializer
from .utils import related_ids

logger = logging.getLogger(__name__)

D = TypeVar("D")
E = TypeVar("E", bound=Model)


class BaseService(Generic[D, E]):
    """
    CRUD over one catalog model, speaking DTOs.

    Subclasses set `dao_class` and `serializer_class` and provide the two
    explicit conversions, `convert_to_dto` and `convert_to_entity`.
    Every failure leaves as a `CatalogError`: bad input is `BadRequest`,
    a missing row is `NotFound`, a duplicate natural key is `Conflict`, and
    anything else the store raises is wrapped in `ServerError`.
    """

    dao_class: Type[BaseDAO]
    serializer_class: Type[Serializer]
    entity_name = "Entity"

    def __init__(self, dao: Optional[BaseDAO] = None, today: Optional[date] = None):
        self.dao = dao if dao is not None else self.dao_class()
        self.today = today

    # Conversion

    def convert_to_dto(self, entity: E) -> D:
        raise NotImplementedError  # pragma: no cover

    def convert_to_entity(self, dto: D) -> E:
        raise NotImplementedError  # pragma: no cover

    def get_related(self, dto: D) -> Dict[str, Iterable[int]]:
        """Many-to-many collections written from the DTO, keyed by field name."""
        return {}

    # Validation

    def get_serializer_context(self) -> Dict[str, Any]:
        return {"today": self.today}

    def validate_dto(self, dto: Optional[D]) -> D:
        """Return a copy of `dto` carrying the serializer's cleaned values."""
        if dto is None:
            raise BadRequest(f"{self.entity_name} data cannot be null")
        serializer = self.serializer_class(data=asdict(dto), context=self.get_serializer_context())
        if not serializer.is_valid():
            raise BadRequest(serializer.errors)
        names = {f.name for f in fields(dto)}
        cleaned = {
            name: set(value) if isinstance(value, list) else value
            for name, value in serializer.validated_data.items()
            if name in names
        }
        return replace(dto, **cleaned)

    def validate_id(self, pk: Optional[int], label: Optional[str] = None) -> int:
        if pk is None or isinstance(pk, bool) or not isinstance(pk, int) or pk <= 0:
            raise BadRequest(f"{label or self.entity_name} ID cannot be null or negative")
        return pk

    def validate_text(self, value: Optional[str], label: str) -> str:
        if value is None or not value.strip():
            raise BadRequest(f"{self.entity_name} {label} cannot be null or empty")
        return value

    def check_unique(self, dto: D, pk: Optional[int] = None) -> None:
        external_id = getattr(dto, "external_id", None)
        if external_id is None:
            return
        existing = self.dao.find_by_external_id(external_id)
        if existing is not None and existing.pk != pk:
            raise Conflict(f"{self.entity_name} already exists with external ID: {external_id}")

    def check_delete(self, entity: E) -> None:
        pass

    @contextmanager
    def translate_errors(self, action: str):
        try:
            yield
        except CatalogError:
            raise
        except IntegrityError as exc:
            raise Conflict(f"Could not {action} {self.entity_name.lower()}: {exc}") from exc
        except Exception as exc:
            logger.warning(
                "Failed to %(action)s %(entity)s: %(error)s",
                {"action": action, "entity": self.entity_name, "error": exc},
            )
            raise ServerError(f"Failed to {action} {self.entity_name.lower()}: {exc}") from exc

    def get_or_404(self, pk: int) -> E:
        with self.translate_errors("retrieve"):
            entity = self.dao.find_by_id(pk)
        if entity is None:
            raise NotFound(f"{self.entity_name} not found with ID: {pk}")
        return entity

    # CRUD

    def get_all(self) -> List[D]:
        with self.translate_errors("retrieve"):
            return [self.convert_to_dto(entity) for entity in self.dao.find_all()]

    def get_by_id(self, pk: Optional[int]) -> D:
        self.validate_id(pk)
        entity = self.get_or_404(pk)
        with self.translate_errors("retrieve"):
            return self.convert_to_dto(entity)

    def save(self, dto: D) -> D:
        dto = self.validate_dto(dto)
        self.check_unique(dto)
        with self.translate_errors("save"):
            entity = self.convert_to_entity(dto)
            # the store assigns surrogate ids
            entity.pk = None
            related = self.get_related(dto)
            entity = self.dao.persist(entity, **related)
            return self.convert_to_dto(self.dao.find_by_id(entity.pk))

    def update(self, dto: D) -> D:
        if dto is None or getattr(dto, "id", None) is None:
            raise BadRequest(f"{self.entity_name} ID is required for update")
        self.validate_id(dto.id)
        dto = self.validate_dto(dto)
        self.get_or_404(dto.id)
        self.check_unique(dto, pk=dto.id)
        with self.translate_errors("update"):
            entity = self.convert_to_entity(dto)
            related = self.get_related(dto)
            self.dao.update(entity, **related)
            return self.convert_to_dto(self.dao.find_by_id(dto.id))

    def delete(self, pk: Optional[int]) -> None:
        self.validate_id(pk)
        entity = self.get_or_404(pk)
        self.check_delete(entity)
        with self.translate_errors("delete"):
            self.dao.delete(entity)
        logger.info(
            "Deleted %(entity)s %(pk)s", {"entity": self.entity_name.lower(), "pk": pk}
        )


class MovieService(BaseService[MovieDTO, Movie]):
    dao_class = MovieDAO
    serializer_class = MovieSerializer
    entity_name = "Movie"

    def convert_to_dto(self, movie: Movie) -> MovieDTO:
        return MovieDTO(
            id=movie.pk,
            external_id=movie.external_id,
            title=movie.title,
            release_date=movie.release_date,
            original_language=movie.original_language,
            rating=movie.rating,
            director_id=movie.director_id,
            genre_ids=related_ids(movie.genres),
            actor_ids=related_ids(movie.actors),
        )

    def convert_to_entity(self, dto: MovieDTO) -> Movie:
        if dto.director_id is not None:
            relations.require_ids(Director, [dto.director_id])
        return Movie(
            id=dto.id,
            external_id=dto.external_id,
            title=dto.title,
            release_date=dto.release_date,
            original_language=dto.original_language,
            rating=dto.rating,
            director_id=dto.director_id,
        )

    def get_related(self, dto: MovieDTO) -> Dict[str, Iterable[int]]:
        return {
            "genres": relations.require_ids(Genre, sorted(dto.genre_ids)),
            "actors": relations.require_ids(Actor, sorted(dto.actor_ids)),
        }

    def search_by_title(self, title: Optional[str]) -> List[MovieDTO]:
        self.validate_text(title, "title")
        with self.translate_errors("search"):
            return [self.convert_to_dto(movie) for movie in self.dao.find_by_title(title)]

    def get_by_director(self, director_id: Optional[int]) -> List[MovieDTO]:
        self.validate_id(director_id, "Director")
        with self.translate_errors("retrieve"):
            return [
                self.convert_to_dto(movie) for movie in self.dao.find_by_director_id(director_id)
            ]

    def assign_director(self, movie_id: int, director_id: Optional[int]) -> MovieDTO:
        self.validate_id(movie_id)
        if director_id is not None:
            self.validate_id(director_id, "Director")
        with self.translate_errors("update"):
            relations.set_movie_director(movie_id, director_id)
        return self.get_by_id(movie_id)

    def add_genres(self, movie_id: int, *genre_ids: int) -> MovieDTO:
        self.validate_id(movie_id)
        with self.translate_errors("update"):
            relations.add_movie_genres(movie_id, *genre_ids)
        return self.get_by_id(movie_id)

    def remove_genres(self, movie_id: int, *genre_ids: int) -> MovieDTO:
        self.validate_id(movie_id)
        with self.translate_errors("update"):
            relations.remove_movie_genres(movie_id, *genre_ids)
        return self.get_by_id(movie_id)

    def add_actors(self, movie_id: int, *actor_ids: int) -> MovieDTO:
        self.validate_id(movie_id)
        with self.translate_errors("update"):
            relations.add_movie_actors(movie_id, *actor_ids)
        return self.get_by_id(movie_id)

    def remove_actors(self, movie_id: int, *actor_ids: int) -> MovieDTO:
        self.validate_id(movie_id)
        with self.translate_errors("update"):
            relations.remove_movie_actors(movie_id, *actor_ids)
        return self.get_by_id(movie_id)


class GenreService(BaseService[GenreDTO, Genre]):
    dao_class = GenreDAO
    serializer_class = GenreSerializer
    entity_name = "Genre"

    def convert_to_dto(self, genre: Genre) -> GenreDTO:
        return GenreDTO(
            id=genre.pk,
            external_id=genre.external_id,
            genre_name=genre.genre_name,
            movie_ids=related_ids(genre.movies),
        )

    def convert_to_entity(self, dto: GenreDTO) -> Genre:
        return Genre(id=dto.id, external_id=dto.external_id, genre_name=dto.genre_name)

    def check_unique(self, dto: GenreDTO, pk: Optional[int] = None) -> None:
        existing = self.dao.find_by_genre_name(dto.genre_name)
        if existing is not None and existing.pk != pk:
            raise AlreadyExists(f"Genre already exists with name: {dto.genre_name}")
        super().check_unique(dto, pk)

    def check_delete(self, genre: Genre) -> None:
        if genre.movies.exists():
            raise Conflict(
                f"Cannot delete genre with ID {genre.pk} because it has associated movies"
            )

    def find_by_name(self, genre_name: Optional[str]) -> GenreDTO:
        self.validate_text(genre_name, "name")
        with self.translate_errors("retrieve"):
            genre = self.dao.find_by_genre_name(genre_name)
        if genre is None:
            raise NotFound(f"Genre not found with name: {genre_name}")
        return self.convert_to_dto(genre)

    def search_by_name(self, genre_name: Optional[str]) -> List[GenreDTO]:
        self.validate_text(genre_name, "name")
        with self.translate_errors("search"):
            return [
                self.convert_to_dto(genre)
                for genre in self.dao.find_by_genre_name_containing(genre_name)
            ]

    def get_movie_titles(self, genre_id: Optional[int]) -> List[str]:
        self.validate_id(genre_id)
        genre = self.get_or_404(genre_id)
        return [movie.title for movie in genre.movies.all()]


class DirectorService(BaseService[DirectorDTO, Director]):
    dao_class = DirectorDAO
    serializer_class = DirectorSerializer
    entity_name = "Director"

    def convert_to_dto(self, director: Director) -> DirectorDTO:
        return DirectorDTO(
            id=director.pk,
            external_id=director.external_id,
            name=director.name,
            age=director.age,
            job=director.job or "Director",
            actor_ids=related_ids(director.actors),
            movie_ids=related_ids(director.movies),
        )

    def convert_to_entity(self, dto: DirectorDTO) -> Director:
        return Director(
            id=dto.id,
            external_id=dto.external_id,
            name=dto.name,
            age=dto.age,
            job=dto.job or "Director",
        )

    def check_delete(self, director: Director) -> None:
        if director.movies.exists():
            raise Conflict(
                f"Cannot delete director with ID {director.pk} because they have directed movies"
            )

    def search_by_name(self, name: Optional[str]) -> List[DirectorDTO]:
        self.validate_text(name, "name")
        with self.translate_errors("search"):
            return [self.convert_to_dto(d) for d in self.dao.find_by_name_containing(name)]

    def get_movies(self, director_id: Optional[int]) -> List[MovieDTO]:
        self.validate_id(director_id)
        self.get_or_404(director_id)
        return MovieService(today=self.today).get_by_director(director_id)


class ActorService(BaseService[ActorDTO, Actor]):
    dao_class = ActorDAO
    serializer_class = ActorSerializer
    entity_name = "Actor"

    def convert_to_dto(self, actor: Actor) -> ActorDTO:
        return ActorDTO(
            id=actor.pk,
            external_id=actor.external_id,
            name=actor.name,
            age=actor.age,
            director_ids=related_ids(actor.directors),
            movie_ids=related_ids(actor.movies),
        )

    def convert_to_entity(self, dto: ActorDTO) -> Actor:
        return Actor(id=dto.id, external_id=dto.external_id, name=dto.name, age=dto.age)

    def get_related(self, dto: ActorDTO) -> Dict[str, Iterable[int]]:
        return {"directors": relations.require_ids(Director, sorted(dto.director_ids))}

    def search_by_name(self, name: Optional[str]) -> List[ActorDTO]:
        self.validate_text(name, "name")
        with self.translate_errors("search"):
            return [self.convert_to_dto(a) for a in self.dao.find_by_name_containing(name)]

    def add_directors(self, actor_id: int, *director_ids: int) -> ActorDTO:
        self.validate_id(actor_id)
        with self.translate_errors("update"):
            relations.add_actor_directors(actor_id, *director_ids)
        return self.get_by_id(actor_id)

    def remove_directors(self, actor_id: int, *director_ids: int) -> ActorDTO:
        self.validate_id(actor_id)
        with self.translate_errors("update"):
            relations.remove_actor_directors(actor_id, *director_ids)
        return self.get_by_id(actor_id)
