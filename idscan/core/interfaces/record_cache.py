"""
Contract: Record Cache

Memoizes extraction results by image fingerprint so the same
image is not recognized twice.
"""

from abc import ABC, abstractmethod

from idscan.core.entities.identity_record import IdentityRecord


class IRecordCache(ABC):
    """
    Port: Record Cache

    Shared mutable state: implementations must serialize concurrent
    access. None of the operations raise.
    """

    @abstractmethod
    def get(self, fingerprint: str) -> IdentityRecord | None:
        """Cached record, or None on miss. A hit refreshes recency."""
        ...

    @abstractmethod
    def set(self, fingerprint: str, record: IdentityRecord) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...
