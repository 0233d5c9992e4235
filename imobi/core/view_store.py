"""
In-memory materialized views with time-based refresh.

A view is a computed snapshot (dashboard stats, stale-lead listing...) keyed
by the entities it was built from, the organization and its parameters.
Services invalidate by entity after a successful write; any view built from
that entity is dropped and in-flight loads for it are discarded.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from imobi.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewKey:
    name: str
    org_id: Any
    entities: Tuple[str, ...]
    params: Tuple = ()
    entity_id: Any = None


@dataclass
class ViewResult:
    data: Any
    stale: bool = False
    error: Optional[str] = None


@dataclass
class _Entry:
    data: Any
    loaded_at: float
    generation: int


@dataclass
class ViewStore:
    ttl_seconds: float
    clock: Callable[[], float] = field(default=time.monotonic)
    _entries: Dict[ViewKey, _Entry] = field(default_factory=dict)
    _generations: Dict[ViewKey, int] = field(default_factory=dict)

    def _is_fresh(self, entry: _Entry) -> bool:
        return self.clock() - entry.loaded_at < self.ttl_seconds

    def _next_generation(self, key: ViewKey) -> int:
        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation
        return generation

    async def get_or_load(
        self,
        key: ViewKey,
        loader: Callable[[], Awaitable[Any]]
    ) -> ViewResult:
        """
        Return the cached view while fresh, otherwise run `loader`.

        A load superseded by a newer request or an invalidation still answers
        its own caller but never replaces the stored snapshot. If the loader
        fails and an earlier snapshot exists, that snapshot is returned
        marked stale; otherwise the error propagates.
        """
        entry = self._entries.get(key)
        if entry is not None and self._is_fresh(entry):
            return ViewResult(data=entry.data)

        ticket = self._next_generation(key)
        try:
            data = await loader()
        except Exception as e:
            if entry is None:
                raise
            logger.warning("Refresh of view %s failed, serving previous snapshot: %s", key.name, e)
            return ViewResult(data=entry.data, stale=True, error=str(e))

        if self._generations.get(key) == ticket:
            self._entries[key] = _Entry(data=data, loaded_at=self.clock(), generation=ticket)
        else:
            logger.debug("Discarding superseded load of view %s", key.name)
        return ViewResult(data=data)

    def invalidate(self, entity: str, entity_id: Any = None) -> int:
        """
        Drop every view built from `entity`.

        Detail views (keys carrying an `entity_id`) are only dropped when the
        id matches or no id is given. Returns the number of views dropped.
        """
        matched = [
            key for key in set(self._entries) | set(self._generations)
            if entity in key.entities
            and (entity_id is None or key.entity_id is None or key.entity_id == entity_id)
        ]
        dropped = 0
        for key in matched:
            if self._entries.pop(key, None) is not None:
                dropped += 1
            # Bump so loads already in flight are discarded
            self._next_generation(key)
        if dropped:
            logger.debug("Invalidated %d view(s) for %s %s", dropped, entity, entity_id or "")
        return dropped

    def clear(self):
        self._entries.clear()
        self._generations.clear()


dashboard_views = ViewStore(ttl_seconds=settings.DASHBOARD_REFRESH_SECONDS)
stale_lead_views = ViewStore(ttl_seconds=settings.STALE_LEADS_REFRESH_SECONDS)


def invalidate(entity: str, entity_id: Any = None):
    """Invalidate `entity` across every application view store."""
    for store in (dashboard_views, stale_lead_views):
        store.invalidate(entity, entity_id)
