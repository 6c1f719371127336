"""Exception hierarchy for catalogcache.

Services raise these; ``CatalogService.execute`` maps them to ``Outcome``
kinds at the boundary.
"""


class CatalogError(Exception):
    """Base class for catalog business-rule failures."""

    pass


class ValidationError(CatalogError):
    """Bad input: missing category, duplicate SKU or name, bad bulk count."""

    pass


class NotFoundError(CatalogError):
    """The requested entity does not exist."""

    def __init__(self, kind: str, entity_id: int) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind.capitalize()} {entity_id} not found")


class ConflictError(CatalogError):
    """Optimistic concurrency check failed; reread and retry."""

    pass


class RateLimitedError(CatalogError):
    """The caller's admission budget is exhausted."""

    def __init__(self, partition_key: str, policy_name: str) -> None:
        self.partition_key = partition_key
        self.policy_name = policy_name
        super().__init__(f"Rate limit '{policy_name}' exceeded for {partition_key}")


class AuthenticationError(CatalogError):
    """Credentials were missing or rejected."""

    pass


class StoreError(Exception):
    """The store collaborator failed (unavailable, constraint, fault)."""

    pass


class ConcurrencyConflictError(StoreError):
    """A row's version changed between read and commit."""

    def __init__(self, entity_id: int, expected: int, actual: int | None) -> None:
        self.entity_id = entity_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Row {entity_id} version mismatch: expected {expected}, found {actual}"
        )
