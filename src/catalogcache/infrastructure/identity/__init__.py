"""Identity collaborator implementations."""

from catalogcache.infrastructure.identity.static import StaticTokenAuthenticator

__all__ = ["StaticTokenAuthenticator"]
