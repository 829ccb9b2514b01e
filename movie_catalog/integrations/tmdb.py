import httpx
from typing import Any, Dict, List, Optional

from movie_catalog.core.settings import settings


class TMDBError(Exception):
    """Upstream TMDb failure (missing credentials, HTTP error, bad payload)."""


class TMDBClient:
    def __init__(
        self,
        api_key: Optional[str],
        bearer_token: Optional[str] = None,
        base: str = "https://api.themoviedb.org/3",
        timeout: float = 15.0,
    ):
        self.api_key = api_key
        self.bearer_token = bearer_token
        self.base = base.rstrip("/")
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key or self.bearer_token)

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        GET a TMDb v3 endpoint. Uses the v4 bearer token when present,
        otherwise the v3 api_key query parameter.
        """
        if not self.configured:
            raise TMDBError("TMDb credentials are not configured")

        headers: Dict[str, str] = {"Accept": "application/json"}
        query: Dict[str, Any] = dict(params or {})
        if self.bearer_token:
            headers["Authorization"] = f"Bearer {self.bearer_token}"
        else:
            query["api_key"] = self.api_key

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                r = await client.get(f"{self.base}{path}", params=query, headers=headers)
                r.raise_for_status()
                return r.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise TMDBError(f"TMDb request to {path} failed: {exc.__class__.__name__}") from exc

    async def now_playing(self, page: int = 1) -> List[Dict[str, Any]]:
        data = await self._get("/movie/now_playing", {"language": "en-US", "page": page})
        return data.get("results") or []

    async def popular(self, page: int = 1) -> List[Dict[str, Any]]:
        data = await self._get("/movie/popular", {"language": "en-US", "page": page})
        return data.get("results") or []

    async def search_movies(self, query: str) -> List[Dict[str, Any]]:
        data = await self._get("/search/movie", {"query": query})
        return data.get("results") or []

    async def movie_detail(self, movie_id: int, append: Optional[List[str]] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if append:
            params["append_to_response"] = ",".join(append)
        return await self._get(f"/movie/{movie_id}", params)


def get_tmdb_client() -> TMDBClient:
    """FastAPI dependency; reads settings per call so tests can patch them."""
    return TMDBClient(
        api_key=settings.tmdb_api_key,
        bearer_token=settings.tmdb_bearer_token,
        base=settings.tmdb_base_url,
    )
