"""Default key builder implementation."""

from catalogcache.core.entities.query_predicate import QueryPredicate
from catalogcache.utils.hashing import hash_value


class DefaultKeyBuilder:
    """Default key builder using a hash of the predicate.

    List keys look like ``catalog:products:e<epoch>:<hash>`` and entity keys
    like ``catalog:product:<id>``.
    """

    def __init__(self, prefix: str = "catalog") -> None:
        """Initialize the key builder.

        Args:
            prefix: Prefix for all cache keys.
        """
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    def build_list_key(self, predicate: QueryPredicate, epoch: int) -> str:
        """Build the key of one product listing page.

        Args:
            predicate: The filter and page request.
            epoch: The epoch current when the key is built.

        Returns:
            A key unique to the predicate within that epoch.
        """
        predicate_hash = hash_value(predicate.to_key_dict())
        return ":".join([self._prefix, "products", f"e{epoch}", predicate_hash])

    def build_entity_key(self, kind: str, entity_id: int) -> str:
        """Build the key of a single entity lookup.

        Args:
            kind: Entity family, e.g. ``"product"`` or ``"category"``.
            entity_id: The entity identity.

        Returns:
            The entity key; it does not depend on the epoch.
        """
        return ":".join([self._prefix, kind, str(entity_id)])
