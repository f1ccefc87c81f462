"""
Contract: Field Extractor

Parses raw recognized text into an IdentityRecord.
"""

from abc import ABC, abstractmethod

from idscan.core.entities.identity_record import IdentityRecord


class IFieldExtractor(ABC):
    """
    Port: Field Extractor

    Implementations are pure and reentrant, and never raise:
    on total failure they return an empty record.
    """

    @abstractmethod
    def extract(self, raw_text: str) -> IdentityRecord:
        ...
