from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Type

import requests
from rest_framework.serializers import Serializer

from .conf import get_api_key, get_setting
from .dtos import TMDBCredits, TMDBGenre, TMDBPage
from .exceptions import TMDBRequestError, TMDBResponseError
from .serializers import TMDBCreditsSerializer, TMDBGenreListSerializer, TMDBPageSerializer

logger = logging.getLogger(__name__)


class TMDBClient:
    """
    Blocking client for the handful of TMDB endpoints the catalog reads.

    One GET per call, no retries. A non-2xx answer or a connection failure
    raises `TMDBRequestError`; a body that does not decode into the expected
    shape raises `TMDBResponseError`. An empty result is therefore always a
    real empty result, never a hidden transport failure.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key or get_api_key()
        self.base_url = (base_url or get_setting("TMDB_BASE_URL")).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else get_setting("TMDB_TIMEOUT")

    def _get(self, path: str, **params: Any) -> Any:
        url = f"{self.base_url}{path}"
        params["api_key"] = self.api_key
        logger.debug("TMDB GET %(url)s page=%(page)s", {"url": url, "page": params.get("page")})
        try:
            response = self.session.get(
                url, params=params, headers={"accept": "application/json"}, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise TMDBRequestError(f"TMDB request to {path} failed: {exc}", url=url) from exc

        if not response.ok:
            raise TMDBRequestError(
                f"TMDB error {response.status_code} on {path}: {response.text}",
                url=url,
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise TMDBResponseError(
                f"TMDB returned invalid JSON on {path}: {exc}",
                url=url,
                status_code=response.status_code,
            ) from exc

    def _decode(self, serializer_class: Type[Serializer], payload: Any, path: str):
        serializer = serializer_class(data=payload)
        if not serializer.is_valid():
            raise TMDBResponseError(f"Unexpected TMDB payload on {path}: {serializer.errors}")
        return serializer.save()

    def get_genres(self, language: Optional[str] = None) -> List[TMDBGenre]:
        path = "/genre/movie/list"
        payload = self._get(path, language=language or get_setting("GENRE_LANGUAGE"))
        return self._decode(TMDBGenreListSerializer, payload, path)

    def discover_movies(
        self,
        page: int = 1,
        language: Optional[str] = None,
        release_date_gte: Optional[date] = None,
        release_date_lte: Optional[date] = None,
    ) -> TMDBPage:
        path = "/discover/movie"
        params: Dict[str, Any] = {"page": page}
        if language:
            params["with_original_language"] = language
        if release_date_gte:
            params["primary_release_date.gte"] = release_date_gte.isoformat()
        if release_date_lte:
            params["primary_release_date.lte"] = release_date_lte.isoformat()
        payload = self._get(path, **params)
        return self._decode(TMDBPageSerializer, payload, path)

    def get_credits(self, movie_id: int) -> TMDBCredits:
        path = f"/movie/{movie_id}/credits"
        payload = self._get(path)
        return self._decode(TMDBCreditsSerializer, payload, path)
