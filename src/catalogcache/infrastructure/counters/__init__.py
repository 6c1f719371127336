"""Epoch counter implementations."""

from catalogcache.infrastructure.counters.atomic import AtomicEpochCounter

__all__ = ["AtomicEpochCounter"]
