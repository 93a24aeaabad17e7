"""
Entity Store
=============
Minimal ECS: entities are integer ids, components live in one
dictionary per component class.

Every store is an insertion-ordered dict, so a query walks entities in
creation order. Collision priority and spawn spacing rely on that.
"""

from typing import Dict, Set, Type, TypeVar, Optional, Iterator, Tuple, Any, List


C = TypeVar('C')


class World:
    """
    Holds every live entity of a run plus the components attached to it.

    Destruction is deferred: destroy_entity() only flags the id, and the
    flagged ids are purged by process_dead_entities() once the tick is
    over. Flagged entities already drop out of queries.
    """

    def __init__(self):
        self._ids = 0
        self._alive: Dict[int, None] = {}
        self._stores: Dict[Type, Dict[int, Any]] = {}
        self._doomed: Set[int] = set()

    def create_entity(self) -> int:
        entity_id = self._ids
        self._ids += 1
        self._alive[entity_id] = None
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        if entity_id in self._alive:
            self._doomed.add(entity_id)

    def process_dead_entities(self) -> None:
        """Purge flagged entities and everything attached to them."""
        while self._doomed:
            entity_id = self._doomed.pop()
            self._alive.pop(entity_id, None)
            for store in self._stores.values():
                store.pop(entity_id, None)

    def clear(self) -> None:
        """Forget all entities. Ids are never reused."""
        self._alive.clear()
        self._stores.clear()
        self._doomed.clear()

    def add_component(self, entity_id: int, component: Any) -> None:
        self._stores.setdefault(type(component), {})[entity_id] = component

    def get_component(self, entity_id: int, component_type: Type[C]) -> Optional[C]:
        return self._stores.get(component_type, {}).get(entity_id)

    def has_component(self, entity_id: int, component_type: Type) -> bool:
        return entity_id in self._stores.get(component_type, ())

    def query(self, *component_types: Type) -> Iterator[Tuple[int, ...]]:
        """
        Yield (entity_id, comp_a, comp_b, ...) for each live entity that
        carries every requested component, oldest entity first.

        The id list is copied up front, so systems may spawn entities
        while they iterate. An entity flagged earlier in the same tick
        is skipped.
        """
        stores = [self._stores.get(ct) for ct in component_types]
        if not stores or not all(stores):
            return
        primary, others = stores[0], stores[1:]
        for entity_id in list(primary):
            if entity_id in self._doomed:
                continue
            if any(entity_id not in store for store in others):
                continue
            yield (entity_id,) + tuple(store[entity_id] for store in stores)

    def query_list(self, *component_types: Type) -> List[Tuple[int, ...]]:
        """query() as a list, for systems that walk newest-first."""
        return list(self.query(*component_types))

    def entity_count(self) -> int:
        """Live entities, not counting those flagged this tick."""
        return len(self._alive) - len(self._doomed)

    def is_alive(self, entity_id: int) -> bool:
        return entity_id in self._alive and entity_id not in self._doomed
