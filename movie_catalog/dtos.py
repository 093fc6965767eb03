"""
Data transfer records.

Catalog DTOs are flat: related rows show up as sets of surrogate ids, never as
nested objects. TMDB records mirror the parts of the remote payloads we use.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Set


@dataclass
class MovieDTO:
    id: Optional[int] = None
    external_id: Optional[int] = None
    title: Optional[str] = None
    release_date: Optional[date] = None
    original_language: Optional[str] = None
    rating: Optional[float] = None
    director_id: Optional[int] = None
    genre_ids: Set[int] = field(default_factory=set)
    actor_ids: Set[int] = field(default_factory=set)


@dataclass
class ActorDTO:
    id: Optional[int] = None
    external_id: Optional[int] = None
    name: Optional[str] = None
    age: Optional[int] = None
    director_ids: Set[int] = field(default_factory=set)
    movie_ids: Set[int] = field(default_factory=set)


@dataclass
class DirectorDTO:
    id: Optional[int] = None
    external_id: Optional[int] = None
    name: Optional[str] = None
    age: Optional[int] = None
    job: str = "Director"
    actor_ids: Set[int] = field(default_factory=set)
    movie_ids: Set[int] = field(default_factory=set)


@dataclass
class GenreDTO:
    id: Optional[int] = None
    external_id: Optional[int] = None
    genre_name: Optional[str] = None
    movie_ids: Set[int] = field(default_factory=set)


@dataclass
class TMDBGenre:
    id: int
    name: str


@dataclass
class TMDBMovie:
    id: int
    title: str
    release_date: Optional[date] = None
    original_language: Optional[str] = None
    rating: Optional[float] = None
    genre_ids: List[int] = field(default_factory=list)


@dataclass
class TMDBPage:
    page: int
    results: List[TMDBMovie]
    total_pages: Optional[int] = None
    total_results: Optional[int] = None


@dataclass
class TMDBCastMember:
    id: int
    name: str
    character: Optional[str] = None
    order: Optional[int] = None


@dataclass
class TMDBCrewMember:
    id: int
    name: str
    job: Optional[str] = None
    department: Optional[str] = None


@dataclass
class TMDBCredits:
    id: int
    cast: List[TMDBCastMember] = field(default_factory=list)
    crew: List[TMDBCrewMember] = field(default_factory=list)

    def directors(self) -> List[TMDBCrewMember]:
        return [member for member in self.crew if member.job == "Director"]
