"""Key builder interface."""

from typing import Protocol

from catalogcache.core.entities.query_predicate import QueryPredicate


class IKeyBuilder(Protocol):
    """Contract for building cache keys.

    Key builders must be pure: the same inputs always produce the same key,
    and different predicates produce different keys.
    """

    def build_list_key(self, predicate: QueryPredicate, epoch: int) -> str:
        """Build the key of one product listing page.

        Args:
            predicate: The (already clamped) filter and page request.
            epoch: The epoch current when the key is built.

        Returns:
            A key unique to the predicate within that epoch.
        """
        ...

    def build_entity_key(self, kind: str, entity_id: int) -> str:
        """Build the key of a single entity lookup.

        Args:
            kind: Entity family, e.g. ``"product"`` or ``"category"``.
            entity_id: The entity identity.

        Returns:
            A key that does not depend on the epoch.
        """
        ...
