"""Identity collaborator interface."""

from typing import Any, Protocol

from catalogcache.core.entities.outcome import Subject


class IAuthenticator(Protocol):
    """Contract for resolving request credentials to a caller identity."""

    async def authenticate(self, credentials: Any) -> Subject | None:
        """Authenticate a caller.

        Args:
            credentials: Opaque credentials decoded from the request.

        Returns:
            The authenticated subject, or None when rejected.
        """
        ...
