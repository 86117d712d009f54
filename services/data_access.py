"""Generic read/create/update/delete over the API client with cache invalidation."""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from infrastructure.http_client import ApiClient, ApiError
from services.query_cache import QueryCache, make_key

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryResult:
    data: Any = None
    is_loading: bool = False
    error: Optional[ApiError] = None


@dataclass(frozen=True)
class MutationResult:
    data: Any = None
    error: Optional[ApiError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def detail_url(url: str, item_id: Any) -> str:
    return f"{url.rstrip('/')}/{item_id}/"


class DataAccess:
    def __init__(self, client: ApiClient, cache: QueryCache):
        self.client = client
        self.cache = cache

    def read(
        self,
        key: Iterable[Any],
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        stale_time: Optional[float] = None,
    ) -> QueryResult:
        cache_key = make_key(key, params)
        if self.cache.is_fresh(cache_key, stale_time):
            return QueryResult(data=self.cache.get(cache_key).data)

        def _fetch():
            # Another caller may have finished the same fetch since the check above.
            if self.cache.is_fresh(cache_key, stale_time):
                return self.cache.get(cache_key).data
            generation = self.cache.generation(cache_key)
            try:
                data = self.client.get(url, params=dict(params) if params else None)
            except ApiError as e:
                self.cache.set_error(cache_key, e)
                raise
            self.cache.set_data(cache_key, data, generation)
            return data

        try:
            data = self.cache.dedupe(cache_key, _fetch)
        except ApiError as e:
            entry = self.cache.get(cache_key)
            return QueryResult(data=entry.data if entry else None, error=e)
        return QueryResult(data=data)

    def _mutate(self, method: str, url: str, invalidate_key: Iterable[Any], payload: Any = None) -> MutationResult:
        try:
            response = self.client.request(method, url, json=payload)
            data = self.client.decode(response)
        except ApiError as e:
            log.info(f"{method} {url} failed: {e.message}")
            return MutationResult(error=e)
        self.cache.invalidate(invalidate_key)
        return MutationResult(data=data)

    def create(self, url: str, invalidate_key: Iterable[Any], payload: Any) -> MutationResult:
        return self._mutate("POST", url, invalidate_key, payload)

    def update(self, url: str, invalidate_key: Iterable[Any], item_id: Any, data: Any) -> MutationResult:
        return self._mutate("PUT", detail_url(url, item_id), invalidate_key, data)

    def delete(self, url: str, invalidate_key: Iterable[Any], item_id: Any) -> MutationResult:
        result = self._mutate("DELETE", detail_url(url, item_id), invalidate_key)
        return MutationResult(error=result.error)
