"""Static token authenticator."""

from collections.abc import Mapping
from typing import Any

from catalogcache.core.entities.outcome import Subject


class StaticTokenAuthenticator:
    """Authenticator backed by a fixed token-to-subject table.

    Token issuance lives outside this package; this implementation only
    resolves tokens that were registered up front.
    """

    def __init__(self, tokens: Mapping[str, Subject] | None = None) -> None:
        """Initialize the authenticator.

        Args:
            tokens: Mapping of accepted bearer tokens to subjects.
        """
        self._tokens: dict[str, Subject] = dict(tokens or {})

    def register(self, token: str, subject: Subject) -> None:
        self._tokens[token] = subject

    async def authenticate(self, credentials: Any) -> Subject | None:
        """Resolve a bearer token (optionally ``"Bearer "``-prefixed)."""
        if not isinstance(credentials, str):
            return None
        token = credentials.removeprefix("Bearer ").strip()
        return self._tokens.get(token)
